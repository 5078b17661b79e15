"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Service configuration template for gatling-test-service.
# Replace every <REQUIRED> placeholder before running handle-event or serve.
# Remove <OPTIONAL> entries you do not need; defaults are shown in comments.

service:
  # Source name used on emitted lifecycle events (default: gatling-service).
  name: "<OPTIONAL>"
  # Gatling launcher invoked for every run (default: gatling.sh).
  executable: "<OPTIONAL>"
  # Directory holding logback.xml, gatling.conf and gatling-akka.conf
  # (default: /opt/gatling/conf).
  conf_dir_root: "<OPTIONAL>"
  # Parent directory for per-run workspaces (default: system temp directory).
  temp_path_prefix: "<OPTIONAL>"

resource_store:
  # Provide exactly one of url (configuration service) or local_root
  # (directory laid out as <project>/<stage>/<service>/gatling/...).
  url: "<REQUIRED>"
  # local_root: "<OPTIONAL>"
  timeout_seconds: "<OPTIONAL>"

# Only needed for the serve command.
kafka:
  bootstrap_servers:
    - "<REQUIRED>"
  trigger_topic: "<OPTIONAL>"
  events_topic: "<OPTIONAL>"
  group_id: "<OPTIONAL>"
  security:
    sasl.username: "<OPTIONAL>"
    sasl.password: "<OPTIONAL>"
    security.protocol: "<OPTIONAL>"
    sasl.mechanisms: "<OPTIONAL>"
  poll_interval_ms: "<OPTIONAL>"
  flush_timeout_seconds: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML service configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder service configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Service configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()

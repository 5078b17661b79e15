"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import click

from gatling_test_service.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from gatling_test_service.engine_execution import SubprocessExecutionInvoker
from gatling_test_service.event_transport import (
    EventTransportError,
    KafkaLifecycleEventSender,
    TriggerEventListener,
)
from gatling_test_service.lifecycle_reporting import (
    JsonLinesEventSender,
    LifecycleEventError,
    LifecycleEventSender,
)
from gatling_test_service.resource_store import (
    ConfigurationServiceClient,
    LocalResourceStore,
    ResourceStore,
)
from gatling_test_service.run_execution import LoadTestRunOrchestrator, RunStatus
from gatling_test_service.trigger_events import (
    TriggerEventError,
    TriggerRequest,
    decode_trigger_event,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logger = logging.getLogger("gatling_test_service")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="gatling-test-service")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Log level for messages written to stderr",
)
def cli(log_level: str) -> None:
    """Run Gatling load tests for test.triggered events."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML service configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML service configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="handle-event")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML service configuration file",
)
@click.option(
    "--event",
    "event_file",
    required=True,
    type=click.File("r", encoding="utf-8"),
    help="Path to a test.triggered CloudEvent JSON file, or - for stdin",
)
def handle_event(config_path: str, event_file: TextIO) -> None:
    """Run one test.triggered event and print the lifecycle events as JSON lines."""
    configuration = _load_configuration(config_path)
    try:
        request = decode_trigger_event(event_file.read())
    except TriggerEventError as exc:
        raise CliError(str(exc)) from exc

    orchestrator = _build_orchestrator(
        configuration, JsonLinesEventSender(click.get_text_stream("stdout"))
    )
    try:
        outcome = orchestrator.execute(request)
    except LifecycleEventError as exc:
        raise CliError(str(exc)) from exc
    if outcome.status == RunStatus.FAILED:
        raise CliError(outcome.message)
    if not outcome.reported:
        raise CliError("test finished event could not be reported")


@cli.command(name="serve")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML service configuration file",
)
@click.option(
    "--max-events",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after handling this many test.triggered events",
)
def serve(config_path: str, max_events: int | None) -> None:
    """Consume test.triggered events from Kafka and publish lifecycle events."""
    configuration = _load_configuration(config_path)
    if configuration.kafka is None:
        raise CliError("The serve command requires a kafka section in the configuration.")

    orchestrator = _build_orchestrator(
        configuration, KafkaLifecycleEventSender(configuration.kafka)
    )

    def _handle(request: TriggerRequest) -> None:
        try:
            orchestrator.execute(request)
        except LifecycleEventError:
            logger.warning("Dropped trigger %s: started event not delivered", request.event_id)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Run for trigger %s ended with an unexpected error", request.event_id)

    try:
        handled = TriggerEventListener(configuration.kafka).listen(
            _handle, max_events=max_events
        )
    except EventTransportError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"handled {handled} test.triggered events")


def _load_configuration(config_path: str) -> Configuration:
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _build_resource_store(configuration: Configuration) -> ResourceStore:
    settings = configuration.resource_store
    if settings.local_root is not None:
        return LocalResourceStore(settings.local_root)
    return ConfigurationServiceClient(
        settings.url or "", timeout_seconds=settings.timeout_seconds
    )


def _build_orchestrator(
    configuration: Configuration, event_sender: LifecycleEventSender
) -> LoadTestRunOrchestrator:
    return LoadTestRunOrchestrator(
        configuration.service,
        resource_store=_build_resource_store(configuration),
        event_sender=event_sender,
        execution_invoker=SubprocessExecutionInvoker(configuration.service.executable),
        logger=logging.getLogger("gatling_test_service.run"),
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

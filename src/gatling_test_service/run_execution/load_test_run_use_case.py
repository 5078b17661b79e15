"""Run execution use-case service."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from gatling_test_service.configuration.runtime_settings import ServiceSettings
from gatling_test_service.engine_execution.execution_invoker import (
    ExecutionError,
    ExecutionInvoker,
)
from gatling_test_service.lifecycle_reporting.lifecycle_events import (
    LifecycleEventError,
    LifecycleEventSender,
    build_finished_event,
    build_started_event,
)
from gatling_test_service.resource_store.store_clients import ResourceStore
from gatling_test_service.resource_sync.default_config_restorer import (
    DefaultConfigError,
    restore_default_conf_files,
)
from gatling_test_service.resource_sync.resource_sync import (
    RESOURCE_PREFIX,
    ResourceSyncError,
    sync_load_test_resources,
)
from gatling_test_service.service_url.service_url_resolver import (
    ServiceUrlError,
    resolve_service_url,
)
from gatling_test_service.trigger_events.event_contracts import TriggerRequest
from gatling_test_service.workload_config.scenario_name_resolver import resolve_simulation_name
from gatling_test_service.workload_config.workload_config_resolver import (
    WorkloadConfigError,
    resolve_workload_mapping,
)

from .run_contracts import RunOutcome, RunStatus

SKIPPED_MESSAGE = "Gatling test skipped"
SUCCEEDED_MESSAGE = "Gatling test finished successfully"

_module_logger = logging.getLogger(__name__)


class LoadTestRunOrchestrator:
    """Handles one `test.triggered` request from start event to finished event."""

    def __init__(
        self,
        settings: ServiceSettings,
        *,
        resource_store: ResourceStore,
        event_sender: LifecycleEventSender,
        execution_invoker: ExecutionInvoker,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings
        self._resource_store = resource_store
        self._event_sender = event_sender
        self._execution_invoker = execution_invoker
        self._logger = logger or _module_logger
        self._clock = clock or (lambda: datetime.now(UTC))

    def execute(self, request: TriggerRequest) -> RunOutcome:
        """Run the load test for a trigger and report it with a finished event.

        Raises:
          LifecycleEventError: If the started event cannot be sent. No finished
            event is attempted in that case.
          Exception: Any unexpected error raised while running is re-raised
            after the finished event reporting it was sent.
        """
        self._logger.info("Handling test.triggered event: %s", request.event_id)
        try:
            self._event_sender.send(
                build_started_event(request, source=self._settings.name, clock=self._clock)
            )
        except LifecycleEventError as exc:
            self._logger.error("Failed to send task started event (%s), aborting...", exc)
            raise

        run_start = self._clock()
        try:
            outcome = self._run(request, run_start)
        except Exception as exc:
            self._logger.exception("Unexpected error while running gatling tests")
            self._report(request, RunOutcome.failed(run_start, self._clock(), exc))
            raise
        if outcome.status == RunStatus.FAILED:
            self._logger.error(outcome.message)
        return self._report(request, outcome)

    def _run(self, request: TriggerRequest, run_start: datetime) -> RunOutcome:
        try:
            service_url = resolve_service_url(request)
        except ServiceUrlError as exc:
            return RunOutcome.failed(run_start, self._clock(), exc)

        try:
            workspace_dir = tempfile.TemporaryDirectory(
                prefix=RESOURCE_PREFIX, dir=self._settings.temp_path_prefix
            )
        except OSError as exc:
            return RunOutcome.failed(run_start, self._clock(), exc)

        with workspace_dir as workspace_name:
            return self._run_in_workspace(request, service_url, Path(workspace_name), run_start)

    def _run_in_workspace(
        self,
        request: TriggerRequest,
        service_url: str,
        workspace: Path,
        run_start: datetime,
    ) -> RunOutcome:
        try:
            downloaded = sync_load_test_resources(
                self._resource_store,
                request.project,
                request.stage,
                request.service,
                workspace,
            )
        except ResourceSyncError as exc:
            error = ResourceSyncError(
                f"error loading {RESOURCE_PREFIX}/* files for {request.coordinates}: {exc}"
            )
            return RunOutcome.failed(run_start, self._clock(), error)

        if downloaded == 0:
            self._logger.info("No %s resources found for %s", RESOURCE_PREFIX, request.coordinates)
            return RunOutcome.skipped(run_start, self._clock(), SKIPPED_MESSAGE)

        try:
            restore_default_conf_files(self._settings.conf_dir_root, workspace)
        except DefaultConfigError as exc:
            error = DefaultConfigError(
                f"error syncing default conf files for {request.coordinates}: {exc}"
            )
            return RunOutcome.failed(run_start, self._clock(), error)

        try:
            mapping = resolve_workload_mapping(
                self._resource_store, request.project, request.stage, request.service
            )
        except WorkloadConfigError as exc:
            self._logger.warning(
                "Failed to load configuration file: %s - proceeding with default values", exc
            )
            mapping = None

        simulation = resolve_simulation_name(request.test_strategy, mapping)
        self._logger.info(
            "TestStrategy=%s -> simulation=%s -> serviceUrl=%s",
            request.test_strategy,
            simulation,
            service_url,
        )

        environment = dict(os.environ)
        environment["GATLING_HOME"] = str(workspace)
        environment["JAVA_OPTS"] = f"-DserviceURL={service_url}"

        self._logger.info("Running gatling tests")
        started_at = self._clock()
        try:
            output = self._execution_invoker([f"--simulation={simulation}"], environment)
        except ExecutionError as exc:
            self._logger.info("Finished running gatling tests")
            self._logger.info(exc.output)
            return RunOutcome.failed(started_at, self._clock(), exc, output=exc.output)
        finished_at = self._clock()
        self._logger.info("Finished running gatling tests")
        self._logger.info(output)
        return RunOutcome.succeeded(started_at, finished_at, SUCCEEDED_MESSAGE, output)

    def _report(self, request: TriggerRequest, outcome: RunOutcome) -> RunOutcome:
        try:
            self._event_sender.send(
                build_finished_event(
                    request, outcome, source=self._settings.name, clock=self._clock
                )
            )
        except LifecycleEventError as exc:
            self._logger.error("Error sending test finished event: %s", exc)
            return replace(outcome, reported=False)
        return outcome

"""Invocation of the external Gatling engine."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Mapping, Sequence
from typing import Protocol

logger = logging.getLogger(__name__)


class ExecutionError(Exception):
    """Raised when the engine cannot be spawned or exits with a non-zero status."""

    def __init__(self, message: str, *, output: str = "", returncode: int | None = None) -> None:
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class ExecutionInvoker(Protocol):  # pylint: disable=too-few-public-methods
    """Runs the engine with the given arguments and returns its combined output."""

    def __call__(self, args: Sequence[str], env: Mapping[str, str]) -> str: ...


class SubprocessExecutionInvoker:  # pylint: disable=too-few-public-methods
    """Execution invoker spawning the engine executable as a child process."""

    def __init__(self, executable: str) -> None:
        self._executable = executable

    def __call__(self, args: Sequence[str], env: Mapping[str, str]) -> str:
        command = (self._executable, *args)
        command_text = shlex.join(command)
        logger.debug("executing command %s", command_text)
        try:
            completed = subprocess.run(
                list(command),
                env=dict(env),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise ExecutionError(f"Error executing command {command_text}: {exc}") from exc
        if completed.returncode != 0:
            raise ExecutionError(
                f"Error executing command {command_text}: exit status {completed.returncode}\n"
                f"{completed.stdout}",
                output=completed.stdout,
                returncode=completed.returncode,
            )
        return completed.stdout

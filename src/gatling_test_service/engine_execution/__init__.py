"""Engine execution exports."""

from .execution_invoker import ExecutionError, ExecutionInvoker, SubprocessExecutionInvoker

__all__ = ["ExecutionError", "ExecutionInvoker", "SubprocessExecutionInvoker"]

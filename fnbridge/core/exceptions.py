"""
Custom exception classes.

Represent errors related to function compilation and invocation.
"""

from pathlib import Path
from typing import Any, Union


class ConfigurationError(Exception):
    """Raised when the bridge cannot start with the given configuration."""

    pass


class FunctionInvocationError(Exception):
    """Base exception class for function invocation."""

    kind = "invocation"


class FunctionNotFoundError(FunctionInvocationError):
    """Raised when no source file resolves for a logical name."""

    kind = "module_not_found"

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"Module not found: {function_name}")


class TranspileError(FunctionInvocationError):
    """Raised when the compiler rejects a source file."""

    kind = "transpile"

    def __init__(self, source_path: Union[str, Path], cause: Exception):
        self.source_path = str(source_path)
        self.cause = cause
        super().__init__(f"Failed to compile {source_path}: {cause}")


class LoadError(FunctionInvocationError):
    """Raised when a compiled module fails to load."""

    kind = "load"

    def __init__(self, module_path: Union[str, Path], cause: Exception):
        self.module_path = str(module_path)
        self.cause = cause
        super().__init__(f"Failed to load {module_path}: {cause}")


class HandlerError(FunctionInvocationError):
    """
    Raised when a handler reports failure.

    The cause may be any value passed to the failure channel, not only an
    exception, so the message is the stringified cause.
    """

    kind = "handler"

    def __init__(self, cause: Any):
        self.cause = cause
        super().__init__(str(cause))

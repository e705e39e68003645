"""
Function invoker.

Turns one HTTP request into one handler invocation: resolve the source,
recompile it when the compiled output is missing or stale, load the compiled
module fresh, call its handler and validate what it returns.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from ..core.completion import invoke_handler
from ..core.event_builder import EventBuilder, InvocationEventBuilder
from ..core.exceptions import FunctionNotFoundError, HandlerError
from ..core.resolver import DEFAULT_EXTENSIONS, compiled_path, needs_compile, resolve_file
from ..core.transpiler import Transpiler
from ..models.context import InputContext
from ..models.events import InvocationResult
from .module_cache import ModuleCache

logger = logging.getLogger("fnbridge.invoker")


class FunctionInvoker:
    """
    Dev-time invocation bridge for function modules.

    Every request recomputes staleness; concurrent requests for the same
    stale function may each recompile it.
    """

    def __init__(
        self,
        functions_src: Path,
        functions_output: Path,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        transpiler: Optional[Transpiler] = None,
        module_cache: Optional[ModuleCache] = None,
        event_builder: Optional[EventBuilder] = None,
    ):
        self.functions_src = Path(functions_src)
        self.functions_output = Path(functions_output)
        self.extensions = list(extensions)
        self.transpiler = transpiler or Transpiler()
        self.module_cache = module_cache or ModuleCache()
        self.event_builder = event_builder or InvocationEventBuilder()

    def prepare(self, function_name: str) -> Path:
        """
        Resolve a function and make sure its compiled output is current.

        Returns:
            Path of the compiled module

        Raises:
            FunctionNotFoundError: no source file for the name
            TranspileError: the source failed to compile
        """
        source = resolve_file(self.functions_src, function_name, self.extensions)
        if source is None:
            raise FunctionNotFoundError(function_name)

        output = compiled_path(self.functions_output, function_name)
        if needs_compile(source, output):
            self.transpiler.transpile(self.functions_src, source, output)
        else:
            logger.debug(f"Compiled module is up to date: {output}")
        return output

    async def invoke(self, context: InputContext) -> InvocationResult:
        """
        Run one invocation end to end.

        Raises:
            FunctionInvocationError: any failure along the way
        """
        output = self.prepare(context.function_name)
        module = self.module_cache.load(output, context.function_name)
        handler = getattr(module, self.module_cache.handler_attr)

        event = self.event_builder.build(context)
        raw_result = await invoke_handler(handler, event, {})

        if isinstance(raw_result, InvocationResult):
            return raw_result
        try:
            return InvocationResult.model_validate(raw_result)
        except ValidationError as e:
            raise HandlerError(
                f"Invalid function response: expected a mapping with statusCode, got {raw_result!r}"
            ) from e

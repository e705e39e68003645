"""
Function invocation routes.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from ..core.utils import build_response
from .deps import build_input_context, get_function_invoker

logger = logging.getLogger("fnbridge.routes")


async def invoke_function(request: Request) -> Response:
    context = await build_input_context(request, request.path_params.get("function_path", ""))
    invoker = get_function_invoker(request)
    logger.debug(f"Invoking function '{context.function_name}'")
    result = await invoker.invoke(context)
    return build_response(result)


def register_functions_routes(app: FastAPI, prefix: str) -> None:
    """
    Serve ``<prefix><function name>`` for every HTTP method.

    Routes are added without a method list so any verb, custom ones included,
    reaches the handler. The bare prefix is matched too and fails like an
    empty function name.
    """
    app.add_route(prefix + "{function_path:path}", invoke_function, include_in_schema=False)
    bare = prefix.rstrip("/")
    if bare:
        app.add_route(bare, invoke_function, include_in_schema=False)

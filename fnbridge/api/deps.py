"""
Request accessors for the function bridge API.
"""

from fastapi import Request

from ..core.exceptions import FunctionNotFoundError
from ..core.resolver import logical_name
from ..models.context import InputContext
from ..services.function_invoker import FunctionInvoker


def get_function_invoker(request: Request) -> FunctionInvoker:
    return request.app.state.function_invoker


async def build_input_context(request: Request, function_path: str) -> InputContext:
    """
    Capture the request as an InputContext.

    The event path is relative to the functions prefix, so a handler behind
    ``/.netlify/functions/hello`` sees ``/hello``.

    Raises:
        FunctionNotFoundError: the path does not name a function
    """
    name = logical_name(function_path)
    if name is None:
        raise FunctionNotFoundError(function_path)

    return InputContext(
        function_name=name,
        method=request.method,
        path="/" + function_path,
        headers=dict(request.headers),
        query_params=dict(request.query_params),
        body=await request.body(),
    )

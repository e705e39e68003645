"""
Response translation utilities.
"""

import base64
import binascii
import json
import logging

from starlette.responses import Response

from ..models.events import InvocationResult
from .exceptions import HandlerError

logger = logging.getLogger("fnbridge.utils")


def result_body_bytes(result: InvocationResult) -> bytes:
    """
    Encode the handler body for the wire.

    Base64 bodies are decoded first; mappings and lists are serialized as JSON.
    """
    body = result.body
    if body is None:
        return b""

    if result.isBase64Encoded:
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise HandlerError(f"Invalid base64 body in function response: {e}") from e

    if isinstance(body, bytes):
        return body
    if isinstance(body, (dict, list)):
        return json.dumps(body, ensure_ascii=False).encode("utf-8")
    return body.encode("utf-8")


def build_response(result: InvocationResult) -> Response:
    """
    Translate an InvocationResult into the outgoing HTTP response.

    Headers are applied in order with their names as given; a later key that
    matches an earlier one case-insensitively replaces it. No default content
    type is added.

    Raises:
        HandlerError: a header name or value is not latin-1 encodable
    """
    content = result_body_bytes(result)
    response = Response(content=content, status_code=result.statusCode)
    raw_headers = list(response.raw_headers)
    for key, value in result.headers.items():
        try:
            name = key.encode("latin-1")
            encoded = value.encode("latin-1")
        except UnicodeEncodeError as e:
            raise HandlerError(f"Invalid header in function response: {key!r}: {e}") from e
        raw_headers = [item for item in raw_headers if item[0].lower() != name.lower()]
        raw_headers.append((name, encoded))
    response.raw_headers = raw_headers
    return response

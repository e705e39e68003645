import base64
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ..models.context import InputContext
from ..models.events import InvocationEvent

logger = logging.getLogger("fnbridge.event_builder")

# Content types passed through verbatim; anything else is base64 encoded.
TEXTUAL_CONTENT_TYPE = re.compile(r"text|application", re.IGNORECASE)


class EventBuilder(ABC):
    @abstractmethod
    def build(self, context: InputContext) -> Dict[str, Any]:
        """
        Build an event dictionary from an InputContext.
        """
        pass


class InvocationEventBuilder(EventBuilder):
    """Serverless function event builder."""

    def build(self, context: InputContext) -> Dict[str, Any]:
        """
        Build the invocation event handed to a function handler.
        """
        body, is_base64 = encode_body(context.body, context.headers.get("content-type"))

        event_model = InvocationEvent(
            path=context.path,
            httpMethod=context.method,
            queryStringParameters=context.query_params,
            headers=context.headers,
            body=body,
            isBase64Encoded=is_base64,
        )
        return event_model.model_dump()


def encode_body(body: bytes, content_type: Optional[str]) -> Tuple[Optional[str], bool]:
    """
    Decide how a request body travels inside the event.

    Returns:
        (body, is_base64) where body is None for an empty request body
    """
    if not body:
        return None, False

    if not TEXTUAL_CONTENT_TYPE.search(content_type or ""):
        return base64.b64encode(body).decode("ascii"), True

    try:
        return body.decode("utf-8"), False
    except UnicodeDecodeError:
        logger.debug(f"Body declared as {content_type} is not UTF-8, sending base64")
        return base64.b64encode(body).decode("ascii"), True

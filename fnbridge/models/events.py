"""
Pydantic models for the serverless invocation contract.

InvocationEvent is what a function handler receives; InvocationResult is
what it hands back. Field names follow the platform contract, so they are
camelCase on purpose.
"""

from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class InvocationEvent(BaseModel):
    """
    Synthetic invocation event built from one HTTP request.

    Use model_dump() to convert to the dict passed to handlers.
    """

    path: str
    httpMethod: str
    queryStringParameters: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    isBase64Encoded: bool = False


class InvocationResult(BaseModel):
    """Handler response translated into the outgoing HTTP response."""

    statusCode: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Union[str, bytes, dict, list]] = None
    isBase64Encoded: bool = False

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

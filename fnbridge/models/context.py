"""
Input context models.

Encapsulates all data required to process a function invocation request.
"""

from typing import Dict

from pydantic import BaseModel, Field


class InputContext(BaseModel):
    """
    Rich context representing an incoming request.

    This model decouples the service layer from FastAPI's Request object.
    """

    function_name: str
    method: str
    path: str
    headers: Dict[str, str] = Field(default_factory=dict)
    query_params: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

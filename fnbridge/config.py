"""
Function bridge configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import json
import sys
from pathlib import Path
from typing import Annotated, List, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .core.resolver import DEFAULT_EXTENSIONS

DEFAULT_LOG_CONFIG_PATH = str(Path(__file__).parent / "logging.yml")


class BridgeConfig(BaseSettings):
    """
    Configuration management for the function bridge.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_CONFIG_PATH: str = Field(
        default=DEFAULT_LOG_CONFIG_PATH, description="Logging definition file path"
    )

    # Function directories
    FUNCTIONS_SRC: Path = Field(..., description="Functions source directory")
    FUNCTIONS_OUTPUT: Path = Field(..., description="Compiled functions directory")
    EXTENSIONS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Recognized source extensions, in priority order",
    )

    # Dev server
    FUNCTIONS_PREFIX: str = Field(
        default="/.netlify/functions/", description="HTTP path prefix for invocations"
    )
    BIND_ADDR: str = Field(default="127.0.0.1:8888", description="Listen address")

    # Transpiler
    TRANSPILE_TARGET: str = Field(default="3.8", description="Target interpreter baseline")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @field_validator("EXTENSIONS", mode="before")
    @classmethod
    def _split_extensions(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                value = json.loads(value)
            else:
                value = value.split(",")
        return value

    @field_validator("EXTENSIONS")
    @classmethod
    def _normalize_extensions(cls, value: List[str]) -> List[str]:
        normalized = []
        for ext in value:
            ext = ext.strip()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            raise ValueError("EXTENSIONS must name at least one extension")
        return normalized

    @field_validator("FUNCTIONS_PREFIX")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        return "/" + value.strip("/") + "/" if value.strip("/") else "/"

    @field_validator("TRANSPILE_TARGET")
    @classmethod
    def _check_target(cls, value: str) -> str:
        parse_target(value)
        return value

    @property
    def target_version(self) -> Tuple[int, int]:
        return parse_target(self.TRANSPILE_TARGET)

    @property
    def bind_host_port(self) -> Tuple[str, int]:
        host, _, port = self.BIND_ADDR.rpartition(":")
        return host or "127.0.0.1", int(port)


def parse_target(value: str) -> Tuple[int, int]:
    """Parse a ``major.minor`` interpreter version string."""
    try:
        major, minor = (int(part) for part in str(value).split("."))
    except ValueError:
        raise ValueError(f"Invalid target version: {value!r} (expected 'major.minor')")
    return major, minor


def load_config(**overrides) -> BridgeConfig:
    """
    Build the configuration from the environment, applying explicit overrides.
    """
    try:
        return BridgeConfig(**overrides)
    except Exception as e:
        sys.stderr.write(f"Failed to load configuration: {e}\n")
        raise

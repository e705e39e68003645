"""Local serverless function emulation and build plugin."""

from .config import BridgeConfig, load_config
from .main import create_app
from .plugin import FunctionsPlugin

__all__ = ["BridgeConfig", "FunctionsPlugin", "create_app", "load_config"]

"""
Function bridge dev server.

Emulates serverless function invocation locally: requests under the
functions prefix are compiled on demand and dispatched to the matching
function handler.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config import BridgeConfig, load_config
from .middleware import request_context_middleware
from .plugin import FunctionsPlugin

logger = logging.getLogger("fnbridge.main")


def create_app(config: Optional[BridgeConfig] = None) -> FastAPI:
    """
    Assemble the dev server application.

    Raises:
        ConfigurationError: the functions source directory is missing
    """
    config = config or load_config()
    plugin = FunctionsPlugin(config)
    plugin.on_pre_init()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Function bridge started.")
        yield
        module_cache = app.state.function_invoker.module_cache
        logger.info(f"Function bridge shutting down, dropping {len(module_cache)} loaded modules.")
        module_cache.clear()

    app = FastAPI(title="fnbridge", lifespan=lifespan, docs_url=None, redoc_url=None)
    app.state.config = config
    app.state.plugin = plugin
    app.middleware("http")(request_context_middleware)
    plugin.on_create_dev_server(app)
    return app

"""
Site generator plugin hooks.

The host calls these at three points of its lifecycle: before anything else
(validate and prepare directories), when it builds its dev server (mount the
invocation bridge), and after a full build (compile every function).
"""

import logging
from pathlib import Path
from typing import List

from fastapi import FastAPI

from .api.routes import register_functions_routes
from .config import BridgeConfig
from .core.exceptions import ConfigurationError
from .core.transpiler import Transpiler
from .exceptions import register_exception_handlers
from .services.builder import FunctionBuilder
from .services.function_invoker import FunctionInvoker

logger = logging.getLogger("fnbridge.plugin")


class FunctionsPlugin:
    def __init__(self, config: BridgeConfig):
        self.config = config
        self.transpiler = Transpiler(target=config.target_version)

    def on_pre_init(self) -> None:
        """
        Raises:
            ConfigurationError: the functions source directory does not exist
        """
        functions_src = self.config.FUNCTIONS_SRC
        if not functions_src.is_dir():
            raise ConfigurationError(
                "You need to set `functionsSrc` (FUNCTIONS_SRC) to an existing folder, "
                f"got: {functions_src}"
            )
        functions_output = self.config.FUNCTIONS_OUTPUT
        if not functions_output.exists():
            functions_output.mkdir(parents=True)
            logger.info(f"Created functions output directory {functions_output}")

    def on_create_dev_server(self, app: FastAPI) -> FunctionInvoker:
        invoker = FunctionInvoker(
            functions_src=self.config.FUNCTIONS_SRC,
            functions_output=self.config.FUNCTIONS_OUTPUT,
            extensions=self.config.EXTENSIONS,
            transpiler=self.transpiler,
        )
        app.state.function_invoker = invoker
        register_functions_routes(app, self.config.FUNCTIONS_PREFIX)
        register_exception_handlers(app)
        logger.info(
            f"Serving functions from {self.config.FUNCTIONS_SRC} "
            f"under {self.config.FUNCTIONS_PREFIX}"
        )
        return invoker

    def on_post_build(self) -> List[Path]:
        builder = FunctionBuilder(
            functions_src=self.config.FUNCTIONS_SRC,
            functions_output=self.config.FUNCTIONS_OUTPUT,
            extensions=self.config.EXTENSIONS,
            transpiler=self.transpiler,
        )
        return builder.build_all()

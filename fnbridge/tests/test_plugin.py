import pytest
from fastapi import FastAPI

from fnbridge.config import BridgeConfig
from fnbridge.core.exceptions import ConfigurationError
from fnbridge.main import create_app
from fnbridge.plugin import FunctionsPlugin
from fnbridge.services.function_invoker import FunctionInvoker


def test_pre_init_requires_source_directory(tmp_path):
    config = BridgeConfig(FUNCTIONS_SRC=tmp_path / "nope", FUNCTIONS_OUTPUT=tmp_path / "out")

    with pytest.raises(ConfigurationError, match="existing folder"):
        FunctionsPlugin(config).on_pre_init()


def test_pre_init_creates_output_directory(bridge_config, functions_output):
    assert not functions_output.exists()

    FunctionsPlugin(bridge_config).on_pre_init()

    assert functions_output.is_dir()


def test_create_app_fails_fast_without_source(tmp_path):
    config = BridgeConfig(FUNCTIONS_SRC=tmp_path / "nope", FUNCTIONS_OUTPUT=tmp_path / "out")

    with pytest.raises(ConfigurationError):
        create_app(config)


def test_create_dev_server_mounts_bridge(bridge_config):
    app = FastAPI()
    plugin = FunctionsPlugin(bridge_config)

    invoker = plugin.on_create_dev_server(app)

    assert isinstance(invoker, FunctionInvoker)
    assert app.state.function_invoker is invoker
    assert any(
        getattr(route, "path", "") == "/.netlify/functions/{function_path:path}"
        for route in app.routes
    )


def test_post_build_compiles_functions(bridge_config, write_function, functions_output):
    write_function("hello", "def handler(event, context):\n    return {}\n")
    plugin = FunctionsPlugin(bridge_config)
    plugin.on_pre_init()

    built = plugin.on_post_build()

    assert built == [functions_output / "hello.py"]


def test_transpile_target_flows_into_transpiler(functions_src, functions_output):
    config = BridgeConfig(
        FUNCTIONS_SRC=functions_src, FUNCTIONS_OUTPUT=functions_output, TRANSPILE_TARGET="3.11"
    )

    assert FunctionsPlugin(config).transpiler.target == (3, 11)

import os
import textwrap

import httpx
import pytest
import pytest_asyncio

from fnbridge.config import BridgeConfig
from fnbridge.main import create_app


@pytest.fixture
def functions_src(tmp_path):
    path = tmp_path / "functions"
    path.mkdir()
    return path


@pytest.fixture
def functions_output(tmp_path):
    # Not created up front: the pre-init hook is responsible for it.
    return tmp_path / "build" / "functions"


@pytest.fixture
def bridge_config(functions_src, functions_output):
    return BridgeConfig(FUNCTIONS_SRC=functions_src, FUNCTIONS_OUTPUT=functions_output)


@pytest.fixture
def write_function(functions_src):
    """Write a function source file and return its path."""

    def _write(name, code, ext=".py", directory=None):
        path = (directory or functions_src) / f"{name}{ext}"
        path.write_text(textwrap.dedent(code), encoding="utf-8")
        return path

    return _write


def bump_mtime(path, seconds=10):
    """Move a file's mtime into the future."""
    stat = os.stat(path)
    future = stat.st_mtime_ns + seconds * 1_000_000_000
    os.utime(path, ns=(future, future))


@pytest.fixture
def main_app(bridge_config):
    return create_app(bridge_config)


@pytest_asyncio.fixture
async def async_client(main_app):
    transport = httpx.ASGITransport(app=main_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

"""
Command line entry point.

    fnbridge serve   run the dev server with on-demand compilation
    fnbridge build   compile every function for deployment
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import BridgeConfig, load_config
from .core.exceptions import ConfigurationError, TranspileError
from .core.logging_config import setup_logging


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--functions-src", help="Functions source directory (FUNCTIONS_SRC)")
    parser.add_argument(
        "--functions-output", help="Compiled functions directory (FUNCTIONS_OUTPUT)"
    )
    parser.add_argument(
        "--extensions",
        help="Comma separated source extensions in priority order (EXTENSIONS)",
    )
    parser.add_argument("--target", help="Target interpreter baseline, e.g. 3.8")
    parser.add_argument("--log-level", help="Log level (LOG_LEVEL)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fnbridge", description="Serve and build serverless functions locally."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the dev server")
    _add_common_args(serve)
    serve.add_argument("--bind", help="Listen address HOST:PORT (BIND_ADDR)")
    serve.add_argument("--prefix", help="Invocation path prefix (FUNCTIONS_PREFIX)")

    build = subparsers.add_parser("build", help="Compile every function")
    _add_common_args(build)
    return parser


def config_from_args(args: argparse.Namespace) -> BridgeConfig:
    overrides = {
        "FUNCTIONS_SRC": args.functions_src,
        "FUNCTIONS_OUTPUT": args.functions_output,
        "EXTENSIONS": args.extensions,
        "TRANSPILE_TARGET": args.target,
        "LOG_LEVEL": args.log_level,
        "BIND_ADDR": getattr(args, "bind", None),
        "FUNCTIONS_PREFIX": getattr(args, "prefix", None),
    }
    return load_config(**{key: value for key, value in overrides.items() if value is not None})


def run_serve(config: BridgeConfig) -> None:
    import uvicorn

    from .main import create_app

    app = create_app(config)
    host, port = config.bind_host_port
    uvicorn.run(app, host=host, port=port, log_config=None)


def run_build(config: BridgeConfig) -> None:
    from .plugin import FunctionsPlugin

    plugin = FunctionsPlugin(config)
    plugin.on_pre_init()
    built = plugin.on_post_build()
    print(f"Compiled {len(built)} functions into {config.FUNCTIONS_OUTPUT}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
    except ValidationError:
        return 2

    setup_logging(config.LOG_CONFIG_PATH, config.LOG_LEVEL)

    try:
        if args.command == "serve":
            run_serve(config)
        else:
            run_build(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except TranspileError as e:
        print(f"Build failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Command line entry point.
Usage:
    infoshare invoke create 420106 Weather sunny 10:10 Bob AirForce
    infoshare invoke readById 420106
    infoshare serve [--host 127.0.0.1] [--port 8000] [--reload]
    infoshare check-config
"""

import argparse
import sys

from .core.config import get_state_backend, validate_config
from .core.dispatcher import invoke


def invoke_command(args) -> int:
    """Run a single named operation against the configured backend."""
    backend = get_state_backend()
    result = invoke(backend, args.function, args.args)

    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    if result.payload:
        print(result.payload.decode("utf-8"))
    return 0


def serve_command(args) -> int:
    """Launch the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("infoshare.api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def check_config_command(args) -> int:
    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"❌ {issue}", file=sys.stderr)
        return 1

    print("✅ Configuration is valid")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infoshare",
        description="Write-once info records with attribute-filtered queries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    invoke_parser = subparsers.add_parser("invoke", help="Run a named operation")
    invoke_parser.add_argument("function", help="Operation name, e.g. create, readById, queryByGroup")
    invoke_parser.add_argument("args", nargs="*", help="Positional string arguments")
    invoke_parser.set_defaults(handler=invoke_command)

    serve_parser = subparsers.add_parser("serve", help="Launch the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    serve_parser.set_defaults(handler=serve_command)

    check_parser = subparsers.add_parser("check-config", help="Validate environment configuration")
    check_parser.set_defaults(handler=check_config_command)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())

"""Command-line interface."""

import argparse
import os
import uvicorn
from .auth import generate_api_key
from .config import CONFIG_ENV_VAR, load_config


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Console Server")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run the server")
    run_parser.add_argument("--config", default=None, help="Path to config.toml")
    run_parser.add_argument("--host", default=None, help="Host to bind to")
    run_parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    run_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # Key generation command
    key_parser = subparsers.add_parser("gen-key", help="Generate an API key for config.toml")
    key_parser.add_argument("--prefix", default="console", help="Key prefix")

    args = parser.parse_args()

    if args.command == "run":
        if args.config:
            # the app module loads its config on import, possibly in a reloader child
            os.environ[CONFIG_ENV_VAR] = args.config
        config = load_config(args.config)

        uvicorn.run(
            "console_server.main:app",
            host=args.host or config.server.host,
            port=args.port or config.server.port,
            reload=args.reload,
            log_level=config.logging.level.lower(),
        )
    elif args.command == "gen-key":
        print(generate_api_key(prefix=args.prefix))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

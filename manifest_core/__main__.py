#!/usr/bin/env python3

import os
import sys
import argparse
from typing import List, Optional

import uvicorn

from manifest_core import settings as _settings
from manifest_core.api import etag
from manifest_core.api.api import create_app


def get_parser(program: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=program)

    commands = parser.add_subparsers(
        description="Available sub-commands: init, run, etag",
        dest="command",
        required=True,
        metavar="<command>",
        help="the sub-command to be executed"
    )

    parser_init = commands.add_parser(
        "init",
        description="Initialize the project by creating the config file"
    )
    parser_run = commands.add_parser(
        "run",
        description="Run 'uvicorn' ASGI server to serve the manifest core REST API"
    )
    parser_etag = commands.add_parser(
        "etag",
        description="Encode or decode composite validators (entity tags) for debugging purposes"
    )

    parser_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file"
    )
    parser_init.add_argument(
        "--app-version",
        type=str,
        metavar="version",
        help="Application version bound into the entity tags instead of the manifest version"
    )

    parser_run.add_argument(
        "--host",
        type=str,
        metavar="host",
        help="Bind socket to this host (overwriting the config file)"
    )
    parser_run.add_argument(
        "--port",
        type=int,
        metavar="port",
        help="Bind socket to this port (overwriting the config file)"
    )
    parser_run.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on source file changes (development only)"
    )
    parser_run.add_argument(
        "--no-logging",
        action="store_true",
        help="Don't configure logging using the config file"
    )

    group = parser_etag.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--encode",
        nargs=2,
        metavar=("fingerprint", "version"),
        help="Create the entity tag of the origin fingerprint and the version"
    )
    group.add_argument(
        "--decode",
        type=str,
        metavar="etag",
        help="Show the origin fingerprint and the version of an entity tag"
    )

    return parser


def init_project(args: argparse.Namespace) -> int:
    path = os.path.abspath(_settings.CONFIG_PATHS[0])
    if os.path.exists(path) and not args.force:
        print(f"The config file {path!r} already exists. Use '--force' to overwrite it.", file=sys.stderr)
        return 1

    config = _settings.get_default_core_config()
    if args.app_version:
        config.general.app_version = args.app_version
    _settings.SETTINGS_LOG_INFO_FUNCTION = print
    _settings.store_configuration(config, path)
    return 0


def run_server(args: argparse.Namespace) -> int:
    config = _settings.Settings()
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port

    if args.reload:
        uvicorn.run(
            "manifest_core.api:api.app",
            host=config.server.host,
            port=config.server.port,
            reload=True,
            log_config=None if args.no_logging else config.logging.model_dump()
        )
        return 0

    app = create_app(config, configure_logging=not args.no_logging)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_config=None if args.no_logging else config.logging.model_dump()
    )
    return 0


def handle_etag(args: argparse.Namespace) -> int:
    if args.encode:
        fingerprint, version = args.encode
        print(etag.encode_etag(fingerprint, version))
        return 0

    try:
        fingerprint, version = etag.decode_etag(args.decode)
    except etag.ValidatorDecodeError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    print(f"fingerprint: {fingerprint}")
    print(f"version: {version}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = get_parser(sys.argv[0]).parse_args(argv)
    return {
        "init": init_project,
        "run": run_server,
        "etag": handle_etag
    }[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

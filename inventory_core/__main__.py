#!/usr/bin/env python3

"""
Command-line utility to set up, administrate and run the inventory core
"""

import os
import sys
import json
import getpass
import argparse
import logging
from typing import Callable, Dict, List, Optional

import uvicorn
import alembic.config
import sqlalchemy.exc

from inventory_core import settings as _settings
from inventory_core.api import auth
from inventory_core.api.api import create_app
from inventory_core.persistence import database, models


SYSTEMD_UNIT_TEMPLATE = """[Unit]
Description=Inventory core REST API server
After=network-online.target
Wants=network-online.target

[Service]
Type=simple
ExecStart={python} -m inventory_core run
User={user}
WorkingDirectory={directory}
Restart=always
SyslogIdentifier=inventory_core

[Install]
WantedBy=multi-user.target
"""


def _add_init_command(commands: argparse._SubParsersAction):
    parser = commands.add_parser(
        "init",
        description="Create a config file (if there's none yet) and set up the database schema"
    )
    parser.add_argument(
        "--database",
        type=str,
        metavar="url",
        help="SQLAlchemy URL of the database, stored in a newly created config file"
    )
    parser.add_argument(
        "--no-migrations",
        action="store_true",
        help="Create the tables from the models instead of running the alembic migrations"
    )


def _add_tokens_command(commands: argparse._SubParsersAction):
    parser = commands.add_parser("tokens", description="Administrate the clients allowed to use the API")
    actions = parser.add_subparsers(
        description="Available actions: show, add, del",
        dest="action",
        metavar="<action>",
        required=True,
        help="what to do with the clients"
    )

    show = actions.add_parser("show", description="List all clients (their tokens stay hidden)")
    show.add_argument("--json", action="store_true", help="Print the clients as JSON list")
    show.add_argument("--indent", type=int, metavar="n", help="Indentation of the JSON output")

    add = actions.add_parser("add", description="Register a new client with its bearer token")
    add.add_argument("--name", type=str, metavar="name", required=True, help="Unique name of the client")
    add.add_argument(
        "--token",
        type=str,
        metavar="token",
        help="Bearer token of the client (generated and printed if omitted)"
    )

    delete = actions.add_parser("del", description="Remove a client, which revokes its token")
    delete.add_argument("client", metavar="name/ID", help="Name or numeric ID of the client")


def _add_run_command(commands: argparse._SubParsersAction):
    parser = commands.add_parser("run", description="Serve the REST API with the 'uvicorn' ASGI server")
    parser.add_argument("--host", type=str, metavar="host", help="Listen on this host instead of the configured one")
    parser.add_argument("--port", type=int, metavar="port", help="Listen on this port instead of the configured one")
    parser.add_argument(
        "--config",
        type=str,
        metavar="path",
        default="config.json",
        help="Config file to load before the default locations (default: 'config.json')"
    )
    parser.add_argument("--debug", action="store_true", help="Lower all log levels to DEBUG")
    parser.add_argument("--debug-sql", action="store_true", help="Log all SQL statements")
    parser.add_argument("--reload", action="store_true", help="Restart the server when source files change")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="n",
        help="Number of worker processes (can't be combined with --reload)"
    )
    parser.add_argument("--no-access-log", action="store_true", help="Don't write the access log")
    parser.add_argument(
        "--root-path",
        type=str,
        default="",
        metavar="path",
        help="Path prefix of the API when running behind a reverse proxy"
    )


def _add_systemd_command(commands: argparse._SubParsersAction):
    parser = commands.add_parser("systemd", description="Write a systemd unit file to run the API as service")
    parser.add_argument("--force", action="store_true", help="Replace the unit file if it already exists")
    parser.add_argument(
        "--path",
        type=str,
        default=os.path.join(os.path.abspath("."), "inventory_core.service"),
        metavar="path",
        help="Location of the unit file (default: 'inventory_core.service' in the working directory)"
    )


def get_parser(program: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=program, description=__doc__.strip())
    commands = parser.add_subparsers(
        description="Available commands: init, tokens, run, systemd",
        dest="command",
        required=True,
        metavar="<command>",
        help="command to execute ('tokens' requires an action)"
    )
    for add_command in (_add_init_command, _add_tokens_command, _add_run_command, _add_systemd_command):
        add_command(commands)
    return parser


def handle_systemd(args: argparse.Namespace) -> int:
    if os.path.exists(args.path) and not args.force:
        print(f"Refusing to overwrite the existing file {args.path!r}, use --force to do so.", file=sys.stderr)
        return 1

    python = sys.executable
    if not python:
        python = "python3"
        print("Couldn't determine the Python interpreter, check the 'ExecStart' line.", file=sys.stderr)

    with open(args.path, "w") as f:
        f.write(SYSTEMD_UNIT_TEMPLATE.format(
            python=python,
            user=getpass.getuser(),
            directory=os.path.abspath(".")
        ))

    print(
        f"Created the unit file {args.path!r}. Link it into /lib/systemd/system/, "
        f"run 'systemctl daemon-reload' and enable the service."
    )
    return 0


def run_server(args: argparse.Namespace) -> int:
    _settings.CONFIG_PATHS.insert(0, args.config)
    try:
        settings = _settings.Settings()
    except ValueError:
        print("The configuration is invalid, please fix the errors below.", file=sys.stderr)
        raise

    if args.debug:
        settings.logging.root["level"] = "DEBUG"
        for handler in settings.logging.handlers.values():
            handler["level"] = "DEBUG"
    if args.debug_sql:
        settings.database.debug_sql = True

    host = settings.server.host if args.host is None else args.host
    port = settings.server.port if args.port is None else args.port
    app = create_app(settings=settings)

    logging.getLogger("inventory_core").info(f"Serving the inventory API on {host}:{port}")
    uvicorn.run(
        "inventory_core.api.api:api.app" if args.reload else app,
        host=host,
        port=port,
        reload=args.reload,
        workers=args.workers,
        log_level="debug" if args.debug else "info",
        log_config=settings.logging.model_dump(),
        access_log=not args.no_access_log,
        proxy_headers=True,
        root_path=args.root_path
    )
    return 0


def _load_or_create_settings(db: Optional[str] = None) -> _settings.Settings:
    if _settings.find_config_file() is None:
        print("Creating a new config file with default values.")
        _settings.store_configuration(_settings.get_default_core_config(db))
    else:
        print("Using the existing config file. Delete it and the database for a fresh setup.")
    settings = _settings.Settings()
    if db:
        settings.database.connection = db
    return settings


def init_project(args: argparse.Namespace) -> int:
    settings = _load_or_create_settings(_settings.get_db_from_env(args.database))
    if not args.no_migrations:
        alembic.config.main(argv=["-x", f"database={settings.database.connection}", "upgrade", "head"])
    database.init(settings.database.connection, settings.database.debug_sql, create_all=args.no_migrations)

    with database.get_new_session() as session:
        try:
            clients = session.query(models.Token).count()
        except sqlalchemy.exc.DatabaseError:
            print("The database schema is missing, run 'alembic upgrade head' first.", file=sys.stderr)
            return 1

    if clients == 0:
        print("\nNo client is registered yet. Use the 'tokens add' command to allow access to the API.")
    print("Done.")
    return 0


def print_table(objs: List[dict], keys: Optional[List[str]] = None):
    if keys is None:
        keys = []
        for obj in objs:
            keys.extend(key for key in obj if key not in keys)

    widths = {key: max([len(key), *(len(str(obj.get(key))) for obj in objs)]) for key in keys}
    print(" | ".join(f"{key:<{widths[key]}}" for key in keys))
    print("-+-".join("-" * widths[key] for key in keys))
    for obj in objs:
        print(" | ".join(f"{obj.get(key)!s:<{widths[key]}}" for key in keys))


def _init_database():
    settings = _settings.Settings()
    database.init(settings.database.connection, settings.database.debug_sql, create_all=False)


def show_tokens(args: argparse.Namespace) -> int:
    _init_database()
    with database.get_new_session() as session:
        clients = [entry.schema.model_dump() for entry in session.query(models.Token).all()]

    if args.json:
        print(json.dumps(clients, indent=args.indent))
    else:
        print_table(clients, ["id", "name", "active"])
    return 0


def add_token(args: argparse.Namespace) -> int:
    if not args.name:
        print("The client name must not be empty.", file=sys.stderr)
        return 1

    _init_database()
    token = args.token or auth.generate_token()
    with database.get_new_session() as session:
        if session.query(models.Token).filter_by(name=args.name).count():
            print(f"There's already a client named {args.name!r}.", file=sys.stderr)
            return 1
        if session.query(models.Token).filter_by(token=token).count():
            print("This token is already used by another client.", file=sys.stderr)
            return 1
        session.add(models.Token(name=args.name, token=token, active=True))
        session.commit()

    print(f"Added the client {args.name!r}.")
    if not args.token:
        print(f"Its bearer token is: {token}")
    return 0


def del_token(args: argparse.Namespace) -> int:
    _init_database()
    with database.get_new_session() as session:
        if args.client.isdigit():
            entry = session.get(models.Token, int(args.client))
        else:
            entry = session.query(models.Token).filter_by(name=args.client).first()
        if entry is None:
            print(f"There's no client {args.client!r}.", file=sys.stderr)
            return 1

        name, identifier = entry.name, entry.id
        session.delete(entry)
        session.commit()
    print(f"Deleted the client {name!r} (ID {identifier}), its token is revoked.")
    return 0


def handle_tokens(args: argparse.Namespace) -> int:
    actions: Dict[str, Callable[[argparse.Namespace], int]] = {
        "show": show_tokens,
        "add": add_token,
        "del": del_token
    }
    return actions[args.action](args)


def main() -> int:
    program_name = sys.argv[0] if not sys.argv[0].endswith("__main__.py") else "inventory_core"
    namespace = get_parser(program_name).parse_args(sys.argv[1:])

    command_functions = {
        "run": run_server,
        "init": init_project,
        "tokens": handle_tokens,
        "systemd": handle_systemd
    }
    return command_functions[namespace.command](namespace)


if __name__ == '__main__':
    sys.exit(main())

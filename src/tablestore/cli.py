from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, TextIO

from tablestore.adapters.inbound.command_parser import SYNTAX_HINT, CommandParser, ParseError
from tablestore.adapters.outbound.http_client import ClientError, TableStoreClient
from tablestore.infrastructure.config import Config, get_config

GREETING = """Table store interactive client
Available operations:
  CREATE TABLE, INSERT INTO, SELECT, UPDATE, RENAME TABLE, DROP TABLE
Type 'exit' to quit."""


def _with_overrides(
    config: Config,
    host: str | None = None,
    port: int | None = None,
    data_dir: str | None = None,
) -> Config:
    server = config.server.model_copy(
        update={k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    )
    storage = config.storage
    if data_dir:
        storage = storage.model_copy(update={"data_dir": Path(data_dir)})
    return config.model_copy(update={"server": server, "storage": storage})


def cmd_serve(host: str | None, port: int | None, data_dir: str | None) -> None:
    from tablestore.adapters.inbound.rest_api import run_server
    from tablestore.infrastructure.container import Container

    config = _with_overrides(get_config(), host, port, data_dir)
    container = Container.create(config)
    run_server(container.state, host=config.server.host, port=config.server.port)


def run_command(client: TableStoreClient, parser: CommandParser, text: str) -> Any:
    """Parse one command and send it; returns the decoded response."""
    request = parser.parse(text)
    return client.execute(request)


def cmd_exec(command: str, base_url: str, timeout: float) -> int:
    parser = CommandParser()
    with TableStoreClient(base_url, timeout) as client:
        try:
            result = run_command(client, parser, command)
        except (ParseError, ClientError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    print(json.dumps(result, indent=2))
    return 0


def cmd_shell(
    client: TableStoreClient,
    read: Callable[[str], str] = input,
    out: TextIO | None = None,
) -> None:
    """Interactive loop: prompt, parse, send, print.

    Ends on ``exit``/``quit`` or end of input.
    """
    out = out or sys.stdout
    parser = CommandParser()
    print(GREETING, file=out)

    while True:
        try:
            line = read("tablestore> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line.lower() in {"exit", "quit"}:
            break

        try:
            result = run_command(client, parser, line)
        except ParseError as e:
            print(f"Error: {e}", file=out)
            print(SYNTAX_HINT, file=out)
            continue
        except ClientError as e:
            print(f"Error: {e.detail}", file=out)
            continue
        print(json.dumps(result, indent=2), file=out)


def main(argv: list[str] | None = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(prog="tablestore")
    sub = parser.add_subparsers(dest="command", required=True)
    serve_parser = sub.add_parser("serve")
    serve_parser.add_argument("--host")
    serve_parser.add_argument("--port", type=int)
    serve_parser.add_argument("--data-dir")
    exec_parser = sub.add_parser("exec")
    exec_parser.add_argument("statement")
    exec_parser.add_argument("--url", default=config.client.base_url)
    exec_parser.add_argument("--timeout", type=float, default=config.client.timeout_seconds)
    shell_parser = sub.add_parser("shell")
    shell_parser.add_argument("--url", default=config.client.base_url)
    shell_parser.add_argument("--timeout", type=float, default=config.client.timeout_seconds)
    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args.host, args.port, args.data_dir)
    elif args.command == "exec":
        return cmd_exec(args.statement, args.url, args.timeout)
    elif args.command == "shell":
        with TableStoreClient(args.url, args.timeout) as client:
            try:
                client.health()
            except ClientError as e:
                print(f"Error, is the server on? {e.detail}", file=sys.stderr)
                return 1
            cmd_shell(client)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

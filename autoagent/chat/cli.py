"""
Command-line entry point.

    autoagent chat            interactive terminal chat
    autoagent serve           HTTP server (FastAPI + uvicorn)
"""

import argparse
import getpass
import logging
import sys

from ..common.config import load_config, save_config
from ..common.credentials import ConfigCredentialProvider
from ..common.errors import IndexingInProgress, MissingCredential
from .session import ChatSession

REPL_HELP = """Commands:
  /index    list indexed items
  /clear    clear the index
  /help     show this help
  /quit     exit
Start a message with "index this:" or "analyze this:" to index it."""


def _prompt_for_key(config) -> bool:
    """Ask for the API key once and persist it, like the desktop key prompt."""
    try:
        key = getpass.getpass(f"Enter {config.llm.provider} API key (blank to skip): ").strip()
    except (EOFError, KeyboardInterrupt):
        return False
    if not key:
        return False
    setattr(config.llm, f"{config.llm.provider}_api_key", key)
    config._env_sourced_keys.discard(f"{config.llm.provider}_api_key")
    try:
        save_config(config)
    except OSError as e:
        print(f"Warning: could not save API key: {e}", file=sys.stderr)
    return True


def _print_index(session: ChatSession) -> None:
    records = session.store.records
    if not records:
        print("(index is empty)")
        return
    for record in records:
        print(f"[{record.id}] {record.content[:60]}  ({', '.join(record.keywords)})")


def cmd_chat(args):
    config = load_config()
    if args.provider:
        config.llm.provider = args.provider.lower()

    session = ChatSession(config=config)
    if not session.can_operate and _prompt_for_key(config):
        session.set_credentials(ConfigCredentialProvider(config))

    if not session.can_operate:
        print("No API key configured; set one with GROQ_API_KEY or the key prompt.", file=sys.stderr)
        return 1

    print(session.messages[0].text)
    print(REPL_HELP)

    while True:
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        command = line.strip().lower()
        if command in ("/quit", "/exit"):
            break
        if command == "/help":
            print(REPL_HELP)
            continue
        if command == "/index":
            _print_index(session)
            continue
        if command == "/clear":
            print(session.clear_index().text)
            continue

        try:
            for chunk in session.stream(line):
                print(chunk, end="", flush=True)
            print()
        except (MissingCredential, IndexingInProgress) as e:
            print(f"Error: {e}", file=sys.stderr)

    return 0


def cmd_serve(args):
    from .server import run_server

    run_server(host=args.host, port=args.port)
    return 0


def main(argv=None):
    p = argparse.ArgumentParser(description="Auto Agent chat assistant with content indexing")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    pc = sub.add_parser("chat", help="Interactive terminal chat")
    pc.add_argument("--provider", default=None, help="groq, openai, anthropic or google")
    pc.set_defaults(func=cmd_chat)

    ps = sub.add_parser("serve", help="Run the HTTP server")
    ps.add_argument("--host", default=None)
    ps.add_argument("--port", type=int, default=None)
    ps.set_defaults(func=cmd_serve)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

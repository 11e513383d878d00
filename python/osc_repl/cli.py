"""osc-repl CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List

from .config import ConsoleConfig
from .context import ConsoleSession
from .errors import TransportError
from .repl import ConsoleREPL
from .transport import OSCTransport, TransportConfig

LOG = logging.getLogger("osc_repl.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive OSC console")
    parser.add_argument("remote_address", nargs="?", help="Peer address to send to")
    parser.add_argument("remote_port", nargs="?", type=int, help="Peer UDP port")
    parser.add_argument("-i", "--local-ip", default="0.0.0.0", help="Local address to bind (default 0.0.0.0)")
    parser.add_argument("-p", "--local-port", type=int, default=0, help="Local UDP port (default: any)")
    parser.add_argument("-b", "--broadcast", action="store_true", help="Allow broadcast sends when no peer is set")
    parser.add_argument("--json", action="store_true", help="Emit JSON output")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("OSC_REPL_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single line non-interactively (quote the line)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".osc-repl-history",
        help="Path to the command history file",
    )
    parser.add_argument(
        "--query-timeout",
        type=float,
        default=ConsoleConfig.query_timeout,
        help="Seconds to wait for a reply to a value probe",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    transport_config = TransportConfig(
        local_address=args.local_ip,
        local_port=args.local_port,
        remote_address=args.remote_address,
        remote_port=args.remote_port,
        broadcast=args.broadcast,
    )
    session = ConsoleSession(
        transport=OSCTransport(transport_config),
        config=ConsoleConfig(json_output=args.json, query_timeout=args.query_timeout),
        peer=transport_config.default_peer(),
    )
    repl = ConsoleREPL(session, history_path=args.history)
    try:
        if args.command:
            return asyncio.run(repl.run_single(args.command))
        return asyncio.run(repl.run())
    except TransportError as exc:
        LOG.debug("transport failure", exc_info=True)
        print(f"osc-repl: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print()
        return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

"""
Command-line interface for the Lightning adapter.

Provides one command per adapter operation against a single node.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Optional

import structlog

from lnadapter import __version__
from lnadapter.config import AdapterConfig, set_config
from lnadapter.core.node import BackendDescriptor, Implementation, NodeDescriptor
from lnadapter.node import create_service
from lnadapter.node.interface import LightningAdapterError


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lnadapter",
        description="Query and drive Lightning nodes through a version-stable API",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--name", default="alice", help="Node name (default: alice)")
    common.add_argument(
        "--implementation",
        default=Implementation.ECLAIR,
        help="Node implementation (default: eclair)",
    )
    common.add_argument("--host", default="127.0.0.1", help="Node REST host")
    common.add_argument("--rest-port", type=int, default=8080, help="Node REST port (default: 8080)")
    common.add_argument("--password", help="Node API password")
    common.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from configuration)",
    )
    common.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("info", parents=[common], help="Show node info")

    balances_parser = subparsers.add_parser("balances", parents=[common], help="Show wallet balances")
    balances_parser.add_argument("--backend-host", default="127.0.0.1", help="Bitcoind RPC host")
    balances_parser.add_argument("--backend-port", type=int, help="Bitcoind RPC port")
    balances_parser.add_argument("--backend-user", help="Bitcoind RPC user")
    balances_parser.add_argument("--backend-password", help="Bitcoind RPC password")

    subparsers.add_parser("address", parents=[common], help="Get a new on-chain address")
    subparsers.add_parser("channels", parents=[common], help="List channels")
    subparsers.add_parser("peers", parents=[common], help="List peers")

    connect_parser = subparsers.add_parser("connect", parents=[common], help="Connect to peers")
    connect_parser.add_argument("uris", nargs="+", help="Peer URIs (pubkey@host:port)")

    open_parser = subparsers.add_parser("open", parents=[common], help="Open a channel")
    open_parser.add_argument("uri", help="Counterparty URI (pubkey@host:port)")
    open_parser.add_argument("amount", type=int, help="Capacity in sats")
    open_parser.add_argument("--private", action="store_true", help="Do not announce the channel")

    close_parser = subparsers.add_parser("close", parents=[common], help="Close a channel")
    close_parser.add_argument("channel_id", help="Channel id")

    invoice_parser = subparsers.add_parser("invoice", parents=[common], help="Create an invoice")
    invoice_parser.add_argument("amount", type=int, help="Amount in sats")
    invoice_parser.add_argument("--memo", help="Invoice description")

    pay_parser = subparsers.add_parser("pay", parents=[common], help="Pay an invoice")
    pay_parser.add_argument("invoice", help="Encoded payment request")
    pay_parser.add_argument("--amount", type=int, help="Amount in sats, overriding the invoice")

    wait_parser = subparsers.add_parser("wait", parents=[common], help="Wait for the node to come online")
    wait_parser.add_argument("--interval", type=float, help="Seconds between checks (default: from configuration)")
    wait_parser.add_argument("--timeout", type=float, help="Seconds to wait (default: from configuration)")

    return parser


def _to_output(result: Any) -> Any:
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if isinstance(result, list):
        return [_to_output(r) for r in result]
    return result


def build_config(args: argparse.Namespace) -> AdapterConfig:
    """Create configuration from the environment, overridden by command-line options."""
    config_args = {}
    if args.password:
        config_args["eclair_password"] = args.password
    if args.log_level:
        config_args["log_level"] = args.log_level
    if args.log_json:
        config_args["log_json"] = True
    return AdapterConfig(**config_args)


async def run_command(args: argparse.Namespace, config: Optional[AdapterConfig] = None) -> Any:
    """Run a single adapter operation."""
    config = config or build_config(args)
    set_config(config)

    node = NodeDescriptor(
        name=args.name,
        implementation=args.implementation,
        host=args.host,
        rest_port=args.rest_port,
    )
    service = create_service(node, config)

    if args.command == "info":
        return await service.get_info(node)
    if args.command == "balances":
        backend = None
        if args.backend_port:
            backend = BackendDescriptor(
                name="backend",
                host=args.backend_host,
                rpc_port=args.backend_port,
                rpc_user=args.backend_user,
                rpc_password=args.backend_password,
            )
        return await service.get_balances(node, backend)
    if args.command == "address":
        return await service.get_new_address(node)
    if args.command == "channels":
        return await service.get_channels(node)
    if args.command == "peers":
        return await service.get_peers(node)
    if args.command == "connect":
        await service.connect_peers(node, args.uris)
        return {"connected": args.uris}
    if args.command == "open":
        return await service.open_channel(node, args.uri, args.amount, args.private)
    if args.command == "close":
        return await service.close_channel(node, args.channel_id)
    if args.command == "invoice":
        return await service.create_invoice(node, args.amount, args.memo)
    if args.command == "pay":
        return await service.pay_invoice(node, args.invoice, args.amount)
    if args.command == "wait":
        await service.wait_until_online(node, args.interval, args.timeout)
        return {"online": True}

    raise ValueError(f"Unknown command: {args.command}")


def main() -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = build_config(args)
    setup_logging(config.log_level, config.log_json)

    try:
        result = asyncio.run(run_command(args, config))
    except LightningAdapterError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(_to_output(result), indent=2))


if __name__ == "__main__":
    main()

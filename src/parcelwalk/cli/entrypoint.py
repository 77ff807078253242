#!/usr/bin/env python3
"""
entrypoint.py
- Command-line entrypoint for inspecting invoice parcel dependencies.
- Usage:
    parcelwalk --file invoice.yml requires <sha256>
    parcelwalk --invoice example.com/app/1.0.0 members <group>
    parcelwalk --file invoice.yml annotated <key>
"""

import argparse
import signal
import sys

import sentry_sdk
from loguru import logger

from parcelwalk.core import config
from parcelwalk.core.config import configure_logging
from parcelwalk.core.errors import ParcelwalkError
from parcelwalk.core.invoice_client import ConnectionInfo
from parcelwalk.runner import resolve


def handle_exit(signum, frame):
    logger.info("📴 Received shutdown signal. Exiting...")
    sys.exit(0)


def build_parser():
    parser = argparse.ArgumentParser(prog="parcelwalk", description="Invoice parcel dependency resolver")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Local YAML/JSON invoice file")
    source.add_argument("--invoice", help="Invoice id to fetch from the server")
    parser.add_argument("--url", default=config.BINDLE_URL, help="Server base URL (BINDLE_URL)")
    parser.add_argument("--insecure", action="store_true", default=config.BINDLE_INSECURE,
                        help="Skip TLS certificate verification")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--yaml", action="store_true", help="Print parcels as YAML")

    commands = parser.add_subparsers(dest="command", required=True)
    requires = commands.add_parser("requires", help="Parcels transitively required by a parcel")
    requires.add_argument("sha256")
    requires.add_argument("--explain", action="store_true", help="Also list the groups expanded")
    members = commands.add_parser("members", help="Parcels that are members of a group")
    members.add_argument("group")
    annotated = commands.add_parser("annotated", help="Parcels carrying an annotation key")
    annotated.add_argument("key")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.debug or config.DEBUG else None)

    if config.SENTRY_DSN:
        sentry_sdk.init(dsn=config.SENTRY_DSN, traces_sample_rate=0.0)

    signal.signal(signal.SIGINT, handle_exit)
    signal.signal(signal.SIGTERM, handle_exit)

    connection = ConnectionInfo(
        args.url,
        allow_insecure=args.insecure,
        username=config.BINDLE_USERNAME,
        password=config.BINDLE_PASSWORD,
        timeout=config.BINDLE_TIMEOUT,
    )

    try:
        invoice = resolve.obtain_invoice(path=args.file, invoice_id=args.invoice, connection=connection)
        if args.command == "requires":
            output = resolve.run_requires(invoice, args.sha256, as_yaml=args.yaml, explain=args.explain)
        elif args.command == "members":
            output = resolve.run_members(invoice, args.group, as_yaml=args.yaml)
        else:
            output = resolve.run_annotated(invoice, args.key, as_yaml=args.yaml)
    except ParcelwalkError as e:
        logger.error(f"❌ {e}")
        sentry_sdk.capture_exception(e)
        return 1

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
resolve.py
- Glue between invoice sources (local file or server) and the label/closure queries.
- Called by the CLI entrypoint; each run_* function returns the text to print.
"""

import yaml
from loguru import logger

from parcelwalk.core.errors import ParcelwalkError
from parcelwalk.core.invoice_client import ConnectionInfo
from parcelwalk.lib.closure import required_closure
from parcelwalk.lib.invoice_loader import load_invoice
from parcelwalk.lib.parcel_labels import has_annotation, parcels_in


def obtain_invoice(path=None, invoice_id=None, connection=None):
    """
    Load an invoice from `path`, or fetch `invoice_id` from the server.

    Args:
        path (str, optional): Local YAML/JSON invoice file.
        invoice_id (str, optional): Server-side invoice id.
        connection (ConnectionInfo, optional): Defaults to ConnectionInfo.from_env().
    """
    if path:
        return load_invoice(path)
    if not invoice_id:
        raise ParcelwalkError("Either an invoice file or an invoice id is required")

    connection = connection or ConnectionInfo.from_env()
    logger.debug(f"[resolve] Fetching {invoice_id} via {connection!r}")
    with connection.client() as client:
        return client.get_invoice(invoice_id)


def render(parcels, as_yaml=False):
    if as_yaml:
        return yaml.safe_dump([p.to_dict() for p in parcels], sort_keys=False).rstrip()
    return "\n".join(f"{p.sha256}  {p.label.name}" for p in parcels)


def run_requires(invoice, sha256, as_yaml=False, explain=False):
    seed = invoice.find_parcel(sha256)
    if seed is None:
        raise ParcelwalkError(f"Parcel {sha256} is not in invoice {invoice.invoice_id}")

    groups, parcels = required_closure(invoice, seed)
    logger.info(f"[resolve] {seed.label.name or sha256} requires {len(parcels)} parcel(s)")
    output = render(parcels, as_yaml=as_yaml)
    if explain:
        output = "\n".join(f"# group: {g}" for g in groups) + ("\n" + output if output else "")
    return output


def run_members(invoice, group, as_yaml=False):
    parcels = parcels_in(invoice, group)
    if not parcels:
        logger.info(f"[resolve] Group {group} has no members in {invoice.invoice_id}")
    return render(parcels, as_yaml=as_yaml)


def run_annotated(invoice, key, as_yaml=False):
    parcels = [p for p in invoice.parcel or () if has_annotation(p, key)]
    return render(parcels, as_yaml=as_yaml)

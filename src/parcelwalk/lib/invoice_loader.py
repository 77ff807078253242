"""
invoice_loader.py
- Loads an invoice from a local YAML or JSON file into an Invoice record.
"""

from pathlib import Path

import yaml
from loguru import logger

from parcelwalk.core.config_loader import load_yaml, preview_yaml
from parcelwalk.core.constants import INVOICE_FILE_SUFFIXES
from parcelwalk.core.errors import InvalidInvoiceError
from parcelwalk.core.invoice import Invoice


def load_invoice(path):
    """
    Read and parse an invoice file.

    Raises:
        InvalidInvoiceError: If the file is unreadable, does not parse, or is
            not a valid invoice.
    """
    path = Path(path)
    if path.suffix.lower() not in INVOICE_FILE_SUFFIXES:
        logger.warning(f"[invoice_loader] Unexpected suffix for {path.name}, parsing as YAML anyway")

    preview_yaml(str(path), name=path.name)
    try:
        data = load_yaml(path)
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidInvoiceError(f"Cannot read invoice file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise InvalidInvoiceError(f"Invoice file {path} does not parse: {e}") from e

    invoice = Invoice.from_dict(data)
    logger.info(f"[invoice_loader] Loaded {invoice.invoice_id} from {path} "
                f"({len(invoice.parcel or ())} parcels)")
    return invoice

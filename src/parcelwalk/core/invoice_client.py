"""
invoice_client.py
- Connection settings and a thin HTTP client for a bindle-style invoice server.
- Fetches and pushes invoices and parcel bytes; the closure code never calls it,
  it only supplies the Invoice records that code walks.
- Connection failures are retried with tenacity; TLS, auth and HTTP status
  failures surface immediately as distinct InvoiceClientError subclasses.
"""

import requests
from loguru import logger
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from parcelwalk.core import config
from parcelwalk.core.auth import token_manager_for
from parcelwalk.core.constants import (
    DEFAULT_TIMEOUT,
    INVOICE_PATH,
    JSON_MEDIA_TYPE,
    OCTET_STREAM_MEDIA_TYPE,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
)
from parcelwalk.core.errors import (
    AuthenticationError,
    ConnectionFailedError,
    InvalidInvoiceError,
    InvoiceClientError,
    NotFoundError,
    ServerError,
    TlsVerificationError,
)
from parcelwalk.core.invoice import Invoice


class ConnectionInfo:
    """
    Where the invoice server lives and how to talk to it.

    Args:
        base_url (str): API root, e.g. https://bindle.example.com/v1/
        allow_insecure (bool): Skip TLS certificate verification.
        username (str, optional): Basic-auth user.
        password (str, optional): Basic-auth password.
        timeout (int): Per-request timeout in seconds.
    """

    def __init__(self, base_url, allow_insecure=False, username=None, password=None,
                 timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url
        self.allow_insecure = allow_insecure
        self.timeout = timeout
        self.token_manager = token_manager_for(username, password)

    @classmethod
    def from_env(cls):
        return cls(
            config.BINDLE_URL,
            allow_insecure=config.BINDLE_INSECURE,
            username=config.BINDLE_USERNAME,
            password=config.BINDLE_PASSWORD,
            timeout=config.BINDLE_TIMEOUT,
        )

    def client(self):
        session = requests.Session()
        session.verify = not self.allow_insecure
        session.auth = self.token_manager
        if self.allow_insecure:
            logger.warning(f"[client] TLS verification disabled for {self.base_url}")
        return InvoiceClient(self.base_url, session, timeout=self.timeout)

    def __repr__(self):
        return (f"ConnectionInfo(base_url={self.base_url!r}, allow_insecure={self.allow_insecure}, "
                f"token_manager={self.token_manager!r})")


class InvoiceClient:
    def __init__(self, base_url, session, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session
        self.timeout = timeout

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.session.close()

    # --- Invoices ---
    def get_invoice(self, invoice_id):
        """
        Fetch an invoice by id (e.g. "example.com/app/1.0.0").

        Returns:
            Invoice: The parsed invoice.
        """
        response = self._send("GET", f"{INVOICE_PATH}/{invoice_id}",
                              headers={"Accept": JSON_MEDIA_TYPE})
        try:
            data = response.json()
        except ValueError as e:
            raise InvalidInvoiceError(f"Invoice {invoice_id} is not valid JSON: {e}") from e
        invoice = Invoice.from_dict(data)
        logger.info(f"[client] Fetched invoice {invoice_id} ({len(invoice.parcel or ())} parcels)")
        return invoice

    def create_invoice(self, invoice):
        """
        Push an invoice. Returns the server's reply, which lists any parcels
        it does not hold yet under "missing".
        """
        response = self._send("POST", INVOICE_PATH, json=invoice.to_dict(),
                              headers={"Accept": JSON_MEDIA_TYPE})
        logger.info(f"[client] Created invoice {invoice.invoice_id}")
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise InvoiceClientError(f"Reply to invoice {invoice.invoice_id} is not valid JSON: {e}",
                                     url=self.base_url + INVOICE_PATH,
                                     status_code=response.status_code) from e

    # --- Parcels ---
    def get_parcel(self, invoice_id, sha256):
        response = self._send("GET", f"{INVOICE_PATH}/{invoice_id}@{sha256}")
        logger.debug(f"[client] Fetched parcel {sha256} ({len(response.content)} bytes)")
        return response.content

    def create_parcel(self, invoice_id, sha256, data):
        self._send("POST", f"{INVOICE_PATH}/{invoice_id}@{sha256}", data=data,
                   headers={"Content-Type": OCTET_STREAM_MEDIA_TYPE})
        logger.info(f"[client] Uploaded parcel {sha256} to {invoice_id}")

    # --- Transport ---
    @retry(
        reraise=True,
        stop=stop_after_attempt(config.BINDLE_RETRIES),
        wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
        retry=retry_if_exception_type(ConnectionFailedError),
    )
    def _send(self, method, path, **kwargs):
        url = self.base_url + path
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.SSLError as e:
            raise TlsVerificationError(f"TLS verification failed for {url}: {e}", url=url) from e
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.warning(f"[client] ⚠️ {method} {url} failed: {e}")
            raise ConnectionFailedError(f"Could not reach {url}: {e}", url=url) from e
        except requests.exceptions.RequestException as e:
            raise InvoiceClientError(f"{method} {url} failed: {e}", url=url) from e

        status = response.status_code
        if status in (401, 403):
            raise AuthenticationError(f"{method} {url} was rejected ({status})", url=url, status_code=status)
        if status == 404:
            raise NotFoundError(f"{method} {url} not found", url=url, status_code=status)
        if not response.ok:
            raise ServerError(f"{method} {url} failed ({status}): {response.text.strip()}",
                              url=url, status_code=status)
        return response

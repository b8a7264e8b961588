# src/remote/http_catalog.py

"""JSON/HTTP client for the hosted product catalog."""

import json
import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from typing import Any
from urllib.parse import quote

from curl_cffi import CurlError
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.product import Product, ProductId, serialize_fields
from src.remote.base_catalog import (
    ErrorCallback,
    RemoteCatalog,
    RemoteCatalogError,
    SnapshotCallback,
    Subscription,
    parse_products,
)

logger = logging.getLogger("umars_hands.remote.http")


def parse_sse_events(lines: Iterable[bytes | str]) -> Iterator[str]:
    """Yield the joined ``data:`` payload of each server-sent event.

    *lines* is an iterable of ``bytes`` or ``str`` lines without line
    terminators; an empty line ends an event.
    """
    data: list[str] = []
    for raw in lines:
        line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        line = line.rstrip("\r")
        if not line:
            if data:
                yield "\n".join(data)
                data = []
            continue
        if line.startswith(":"):
            continue
        if line.startswith("data:"):
            data.append(line[5:].lstrip(" "))
    if data:
        yield "\n".join(data)


class HttpRemoteCatalog(RemoteCatalog):
    """Talks to the catalog REST API.

    Endpoints, relative to ``base_url``:

    * ``GET  /products?orderBy=name`` - one snapshot
    * ``GET  /products:stream`` - server-sent events, one JSON list per event
    * ``POST /products`` - create, answers ``{"id": ...}``
    * ``PATCH /products/{id}`` - partial update
    * ``DELETE /products/{id}``
    * ``POST /products:batchCreate`` - ``{"documents": [...]}``
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: int | None = None,
    ) -> None:
        self.base_url = (base_url or Settings.CATALOG_API_URL).rstrip("/")
        if not self.base_url:
            raise ValueError("HttpRemoteCatalog needs a base URL")
        self.api_key = (
            Settings.CATALOG_API_KEY if api_key is None else api_key
        )
        self.timeout = timeout or Settings.REQUEST_TIMEOUT
        self.session = curl_requests.Session()
        self._session_lock = threading.Lock()

    # ── Reading ──────────────────────────────────────────

    def fetch_products(self) -> list[Product]:
        data = self._request("GET", "/products?orderBy=name")
        return parse_products(data)

    def subscribe(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        stop = threading.Event()
        holder: dict[str, Any] = {}

        def _cancel() -> None:
            stop.set()
            resp = holder.get("response")
            if resp is not None:
                try:
                    resp.close()
                except CurlError:
                    logger.debug("Stream close raised", exc_info=True)

        thread = threading.Thread(
            target=self._stream,
            args=(on_snapshot, on_error, stop, holder),
            name="catalog-stream",
            daemon=True,
        )
        thread.start()
        logger.info("Subscribed to %s/products:stream", self.base_url)
        return Subscription(_cancel)

    # ── Writing ──────────────────────────────────────────

    def create_product(self, document: Mapping[str, Any]) -> str:
        data = self._request(
            "POST", "/products", serialize_fields(document),
        )
        if not isinstance(data, dict) or "id" not in data:
            raise RemoteCatalogError("create response carries no id")
        return str(data["id"])

    def update_product(
        self, product_id: ProductId, updates: Mapping[str, Any],
    ) -> None:
        self._request(
            "PATCH",
            f"/products/{quote(str(product_id), safe='')}",
            serialize_fields(updates),
        )

    def delete_product(self, product_id: ProductId) -> None:
        self._request(
            "DELETE", f"/products/{quote(str(product_id), safe='')}",
        )

    def batch_create(self, documents: list[Mapping[str, Any]]) -> int:
        self._request(
            "POST",
            "/products:batchCreate",
            {"documents": [serialize_fields(d) for d in documents]},
        )
        return len(documents)

    def close(self) -> None:
        self.session.close()
        super().close()

    # ── Internals ────────────────────────────────────────

    def _headers(self) -> dict[str, str]:
        headers = dict(Settings.DEFAULT_HEADERS)
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one request; any failure becomes ``RemoteCatalogError``."""
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            with self._session_lock:
                resp = self.session.request(
                    method,
                    url,
                    headers=self._headers(),
                    json=dict(payload) if payload is not None else None,
                    timeout=self.timeout,
                )
        except CurlError as exc:
            raise RemoteCatalogError(f"{method} {url} failed: {exc}") from exc

        if resp.status_code >= 400:
            raise RemoteCatalogError(
                f"{method} {url} returned HTTP {resp.status_code}",
                status=resp.status_code,
            )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteCatalogError(
                f"{method} {url} returned invalid JSON"
            ) from exc

    def _stream(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
        stop: threading.Event,
        holder: dict[str, Any],
    ) -> None:
        """Consume the snapshot stream until cancelled or broken."""
        url = f"{self.base_url}/products:stream"
        headers = {**self._headers(), "Accept": "text/event-stream"}
        session = curl_requests.Session()
        try:
            resp = session.get(
                url, headers=headers, stream=True, timeout=None,
            )
            holder["response"] = resp
            if resp.status_code >= 400:
                raise RemoteCatalogError(
                    f"stream returned HTTP {resp.status_code}",
                    status=resp.status_code,
                )
            try:
                for payload in parse_sse_events(resp.iter_lines()):
                    if stop.is_set():
                        break
                    on_snapshot(parse_products(json.loads(payload)))
            except ValueError as exc:
                # Undecodable bytes or JSON in an event
                raise RemoteCatalogError(
                    f"stream event could not be decoded: {exc}"
                ) from exc
            if not stop.is_set():
                raise RemoteCatalogError("snapshot stream ended")
        except RemoteCatalogError as exc:
            if not stop.is_set():
                on_error(exc)
        except CurlError as exc:
            if not stop.is_set():
                on_error(RemoteCatalogError(f"stream failed: {exc}"))
        finally:
            session.close()
            logger.debug("Snapshot stream thread exiting")

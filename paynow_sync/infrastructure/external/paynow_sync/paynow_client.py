"""
Cliente mínimo de la API REST de PayNow (sin SDKs externos).

Requisitos cubiertos:
- requests
- paginación por cursor (`after` = id del último registro de la página)
- delay fijo entre páginas para respetar rate limits (sin reintentos)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import requests
from loguru import logger

from paynow_sync.shared.exceptions import PaynowApiError

DEFAULT_BASE_URL = "https://api.paynow.gg/v1"
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PaynowCredentials:
    api_key: str
    store_id: str


def build_orders_query(*, after: Optional[str], page_size: int) -> dict[str, Any]:
    """
    Construye los query params para listar órdenes completadas.

    `asc` se envía como "true" literal: requests serializaría True como "True".
    `after` solo se incluye cuando ya hay cursor.
    """
    params: dict[str, Any] = {
        "status": "completed",
        "limit": page_size,
        "asc": "true",
    }
    if after:
        params["after"] = after
    return params


class PaynowClient:
    """
    Cliente HTTP de PayNow. Expone un generator que produce páginas de órdenes.

    Importante:
    - No transforma las órdenes: eso lo decide el mapeo a Postgres.
    - No reintenta 429/5xx; cualquier error termina la corrida.
    """

    def __init__(
        self,
        credentials: PaynowCredentials,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = DEFAULT_BASE_URL,
        page_size: int = MAX_PAGE_SIZE,
        page_delay_s: float = 0.1,
    ) -> None:
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size debe estar entre 1 y {MAX_PAGE_SIZE}")
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._page_size = page_size
        self._page_delay_s = page_delay_s
        self._session = session or requests.Session()

    @property
    def orders_url(self) -> str:
        return f"{self._base_url}/stores/{self._creds.store_id}/orders"

    def iter_completed_order_pages(self) -> Iterable[list[dict[str, Any]]]:
        """
        Itera las órdenes completadas en orden ascendente, página por página.

        - Una página con menos de `page_size` registros marca el final.
        - El cursor de la siguiente página es el id del último registro.
        """
        after: Optional[str] = None
        batch = 1

        while True:
            logger.info(f"Fetching batch {batch}...")
            page = self._request_page(after=after)
            yield page

            if len(page) < self._page_size:
                break

            after = page[-1]["id"]
            batch += 1
            # Delay fijo por rate limits
            time.sleep(self._page_delay_s)

    def _request_page(self, *, after: Optional[str]) -> list[dict[str, Any]]:
        """
        GET de una página. Errores HTTP o respuestas que no son un array
        JSON se levantan como PaynowApiError.
        """
        headers = {
            "Authorization": f"APIKey {self._creds.api_key}",
            "Content-Type": "application/json",
        }

        resp = self._session.request(
            method="GET",
            url=self.orders_url,
            params=build_orders_query(after=after, page_size=self._page_size),
            headers=headers,
        )

        if not 200 <= resp.status_code < 300:
            raise PaynowApiError(
                f"PayNow request falló {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise PaynowApiError(
                "Respuesta de PayNow no es JSON válido",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

        if not isinstance(payload, list):
            raise PaynowApiError(
                f"Respuesta inesperada de PayNow (se esperaba un array): {payload!r}",
                status_code=resp.status_code,
                body=payload,
            )

        return payload

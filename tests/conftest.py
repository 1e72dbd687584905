"""
Configuración de fixtures para pytest.

Dobles de prueba para la API de PayNow (sesión requests) y para Postgres
(conexión psycopg con una tabla en memoria).
"""
from typing import Any, Callable, Optional

import pytest

from paynow_sync.infrastructure.external.paynow_sync.paynow_client import (
    PaynowClient,
    PaynowCredentials,
)
from paynow_sync.infrastructure.external.paynow_sync.pg_repository import (
    ORDERS_TABLE_DDL,
    UPSERT_ORDERS_SQL,
    PostgresOrderRepository,
)


_NOT_JSON = object()


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200, text: str = "") -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text or repr(payload)

    def json(self) -> Any:
        if self._payload is _NOT_JSON:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    """Devuelve las respuestas en orden y registra cada request."""

    def __init__(self, responses: list[FakeResponse]) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, params=None, headers=None, **kwargs) -> FakeResponse:
        self.calls.append(
            {"method": method, "url": url, "params": dict(params or {}), "headers": dict(headers or {})}
        )
        if not self._responses:
            raise AssertionError("Se pidieron más páginas de las esperadas")
        return self._responses.pop(0)


class FakeDatabase:
    """Estado compartido entre conexiones: tabla paynow_orders en memoria."""

    def __init__(self) -> None:
        self.table_exists = False
        self.rows: dict[str, tuple] = {}
        self.executed: list[str] = []
        self.connections_closed = 0


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn

    def execute(self, sql: str, params=None) -> None:
        self._conn.db.executed.append(sql)
        if sql == ORDERS_TABLE_DDL:
            self._conn.pending_table = True
        elif sql == UPSERT_ORDERS_SQL:
            for row in zip(*params):
                self._conn.pending_rows[row[0]] = row
        else:
            raise AssertionError(f"SQL inesperado: {sql}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeConnection:
    """Imita psycopg.Connection: commit/rollback explícitos y context manager."""

    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.pending_table = False
        self.pending_rows: dict[str, tuple] = {}
        self.commits = 0
        self.rollbacks = 0

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        if self.pending_table:
            self.db.table_exists = True
        self.db.rows.update(self.pending_rows)
        self.pending_table = False
        self.pending_rows = {}
        self.commits += 1

    def rollback(self) -> None:
        self.pending_table = False
        self.pending_rows = {}
        self.rollbacks += 1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        self.db.connections_closed += 1
        return False


class InMemoryOrderRepository(PostgresOrderRepository):
    """Repositorio real con connect() redirigido a FakeConnection."""

    def __init__(self, db: FakeDatabase) -> None:
        super().__init__("postgresql://dummy")
        self.db = db

    def connect(self) -> FakeConnection:
        return FakeConnection(self.db)


def _make_order(
    order_id: str,
    *,
    total: int = 600,
    subtotal: int = 500,
    minecraft_uuid: Optional[str] = "069a79f4-44e9-4726-a5be-fca90e38aaf5",
    completed_at: str = "2024-03-05T10:22:41.000Z",
) -> dict[str, Any]:
    return {
        "id": order_id,
        "customer": {"minecraft_uuid": minecraft_uuid},
        "subtotal_amount": subtotal,
        "total_amount": total,
        "completed_at": completed_at,
    }


@pytest.fixture
def make_order() -> Callable[..., dict[str, Any]]:
    """Factory de órdenes PayNow crudas."""
    return _make_order


@pytest.fixture
def make_pages() -> Callable[[list[int]], list[list[dict[str, Any]]]]:
    """Construye páginas con los tamaños indicados e ids correlativos."""

    def _build(sizes: list[int]) -> list[list[dict[str, Any]]]:
        pages = []
        counter = 0
        for size in sizes:
            page = []
            for _ in range(size):
                counter += 1
                page.append(_make_order(f"ord_{counter:05d}"))
            pages.append(page)
        return pages

    return _build


@pytest.fixture
def fake_response() -> Callable[..., FakeResponse]:
    return FakeResponse


@pytest.fixture
def not_json() -> object:
    return _NOT_JSON


@pytest.fixture
def make_client() -> Callable[..., tuple[PaynowClient, FakeSession]]:
    """Crea un PaynowClient sin delay sobre una FakeSession."""

    def _build(responses: list[FakeResponse], **kwargs) -> tuple[PaynowClient, FakeSession]:
        session = FakeSession(responses)
        kwargs.setdefault("page_delay_s", 0)
        client = PaynowClient(
            PaynowCredentials(api_key="pnapi_test", store_id="store_123"),
            session=session,
            **kwargs,
        )
        return client, session

    return _build


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def order_repo(fake_db: FakeDatabase) -> InMemoryOrderRepository:
    return InMemoryOrderRepository(fake_db)

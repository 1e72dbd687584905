"""
Repositorio Postgres (psycopg) para la tabla paynow_orders:
- creación idempotente de la tabla
- UPSERT masivo en un solo statement

Se usa psycopg (v3), igual que el resto de pipelines de sync.
"""

from __future__ import annotations

from typing import Iterable

import psycopg
from psycopg.rows import dict_row

from .types import OrderRecord

ORDERS_TABLE = "paynow_orders"

# Guarda lo que necesitamos para Grafana: importes, UUID y fecha de completado.
# Si PayNow cambia el schema o necesitamos más campos, hay que re-sincronizar.
ORDERS_TABLE_DDL = f"""
CREATE TABLE IF NOT EXISTS {ORDERS_TABLE} (
    id              TEXT      PRIMARY KEY,
    minecraft_uuid  UUID      NULL,
    subtotal_cents  INT       NOT NULL,
    total_cents     INT       NOT NULL,
    completed       TIMESTAMP NOT NULL
);
"""

# unnest() permite mandar N filas con 5 parámetros (arrays), sin chocar con
# el límite de parámetros por statement.
UPSERT_ORDERS_SQL = f"""
    INSERT INTO {ORDERS_TABLE} (id, minecraft_uuid, subtotal_cents, total_cents, completed)
    SELECT * FROM unnest(
        %s::text[], %s::uuid[], %s::int[], %s::int[], %s::timestamp[]
    )
    ON CONFLICT (id)
    DO UPDATE SET
        minecraft_uuid = EXCLUDED.minecraft_uuid,
        subtotal_cents = EXCLUDED.subtotal_cents,
        total_cents = EXCLUDED.total_cents,
        completed = EXCLUDED.completed
"""


class PostgresOrderRepository:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn

    def connect(self) -> psycopg.Connection:
        """
        Abre conexión (autocommit False). El caller controla commits.
        """
        try:
            return psycopg.connect(self._dsn, row_factory=dict_row)
        except psycopg.OperationalError as e:
            raise psycopg.OperationalError(
                f"{e}\n"
                f"Sugerencia: verifica SQL_HOST/SQL_PORT (o DATABASE_URL) y que Postgres esté corriendo."
            ) from e

    def ensure_orders_table(self, conn: psycopg.Connection) -> None:
        with conn.cursor() as cur:
            cur.execute(ORDERS_TABLE_DDL)

    def upsert_orders(
        self,
        conn: psycopg.Connection,
        records: Iterable[OrderRecord],
    ) -> int:
        """
        UPSERT por PK (id), last-write-wins sobre todas las columnas no clave.

        Todas las filas viajan en un único statement. Si un id aparece dos
        veces en el lote se queda la última ocurrencia: Postgres no permite
        actualizar la misma fila dos veces en un ON CONFLICT.
        """
        by_id: dict[str, OrderRecord] = {}
        for record in records:
            by_id[record.order_id] = record

        if not by_id:
            return 0

        rows = list(by_id.values())
        values = (
            [r.order_id for r in rows],
            [r.minecraft_uuid for r in rows],
            [r.subtotal_cents for r in rows],
            [r.total_cents for r in rows],
            [r.completed_at for r in rows],
        )

        with conn.cursor() as cur:
            cur.execute(UPSERT_ORDERS_SQL, values)

        return len(rows)

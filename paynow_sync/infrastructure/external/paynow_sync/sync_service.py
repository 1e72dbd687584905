"""
Servicio de sincronización PayNow -> Postgres.

Diseño (resumen):
- Asegura la tabla paynow_orders
- Pagina órdenes completadas en PayNow (cursor `after`, asc, 100 por página)
- Mapea cada orden a una fila tipada
- UPSERT de todas las filas en un solo statement, por id

Estrategia de idempotencia:
- El cursor no se persiste: cada corrida relee todo desde el principio.
- UPSERT last-write-wins: correr N veces deja la misma tabla que correr 1 vez.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from paynow_sync.core.config import Settings
from paynow_sync.shared.exceptions import ConfigurationError

from .paynow_client import PaynowClient, PaynowCredentials
from .pg_repository import PostgresOrderRepository
from .types import OrderRecord, map_order_to_record


@dataclass(frozen=True)
class SyncResult:
    total_processed: int
    upserted_rows: int


class PaynowOrdersSync:
    """
    Orquestador del job: una corrida completa o falla, sin reanudación.
    """

    def __init__(
        self,
        *,
        pg_repo: PostgresOrderRepository,
        paynow: PaynowClient,
    ) -> None:
        self._pg = pg_repo
        self._paynow = paynow

    def run_once(self) -> SyncResult:
        """
        Ejecuta una corrida completa.

        Si la API rompe el contrato (PaynowApiError) o una orden no se puede
        mapear, no se escribe ninguna fila y el error se relanza.
        """
        with self._pg.connect() as conn:
            self._pg.ensure_orders_table(conn)
            conn.commit()

            try:
                records = self._fetch_all_records()
                upserted = 0
                if records:
                    logger.info(f"Inserting {len(records)} orders into database...")
                    upserted = self._pg.upsert_orders(conn, records)
                    conn.commit()
                    logger.success(f"Successfully inserted/updated {upserted} orders")
            except Exception:
                conn.rollback()
                raise

        logger.info(f"Finished processing {len(records)} orders")
        return SyncResult(total_processed=len(records), upserted_rows=upserted)

    def _fetch_all_records(self) -> list[OrderRecord]:
        records: list[OrderRecord] = []
        for page in self._paynow.iter_completed_order_pages():
            for order in page:
                records.append(map_order_to_record(order))
            logger.debug(f"Página procesada: {len(page)} órdenes (acumulado={len(records)})")
        return records


def build_from_settings(
    settings: Settings,
    *,
    session=None,
) -> tuple[PaynowOrdersSync, PostgresOrderRepository, PaynowClient]:
    """
    Constructor “oficial” del pipeline a partir de Settings.

    Valida las credenciales PayNow antes de crear clientes: si faltan se
    levanta ConfigurationError sin abrir red ni base de datos.
    """
    missing = settings.missing_credentials()
    if missing:
        raise ConfigurationError(missing)

    paynow = PaynowClient(
        PaynowCredentials(
            api_key=settings.PAYNOW_API_KEY,
            store_id=settings.PAYNOW_STORE_ID,
        ),
        session=session,
        base_url=settings.PAYNOW_BASE_URL,
        page_size=settings.PAGE_SIZE,
        page_delay_s=settings.PAGE_DELAY_SECONDS,
    )
    pg_repo = PostgresOrderRepository(settings.effective_database_url)
    service = PaynowOrdersSync(pg_repo=pg_repo, paynow=paynow)
    return service, pg_repo, paynow

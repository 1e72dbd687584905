"""
CLI: PayNow -> Postgres (one-way sync de órdenes completadas).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer).
  - Cada ejecución relee todas las órdenes completadas y hace UPSERT.

Variables de entorno requeridas:
  - PAYNOW_API_KEY
  - PAYNOW_STORE_ID (o STORE_ID)
  - SQL_HOST / SQL_PORT / SQL_USER / SQL_PASSWORD / SQL_DATABASE
    (o DATABASE_URL completa)

Ejecución:
  paynow-orders-sync
  paynow-orders-sync --schema-only
  python -m paynow_sync.main --verbose
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger

from paynow_sync.core.config import Settings, get_settings
from paynow_sync.infrastructure.external.paynow_sync.pg_repository import ORDERS_TABLE_DDL
from paynow_sync.infrastructure.external.paynow_sync.sync_service import build_from_settings
from paynow_sync.shared.exceptions import ConfigurationError, PaynowApiError


def _configure_logging(settings: Settings, verbose: bool) -> None:
    log_level = "DEBUG" if verbose else settings.LOG_LEVEL
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
    )
    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            rotation="500 MB",
            retention="10 days",
            level=log_level
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sincroniza órdenes completadas de PayNow a Postgres")
    parser.add_argument(
        "--schema-only",
        action="store_true",
        help="Solo imprime el DDL de paynow_orders (no ejecuta sync).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Mostrar mensajes de debug",
    )
    args = parser.parse_args(argv)

    if args.schema_only:
        print(ORDERS_TABLE_DDL)
        return 0

    # Cargar variables desde .env si existe (no pisa el entorno real).
    load_dotenv(override=False)
    settings = get_settings()
    _configure_logging(settings, args.verbose)

    try:
        service, _pg_repo, _paynow = build_from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Missing Paynow API Key or Store ID: {e.message}")
        return 1

    logger.info("Iniciando PayNow -> Postgres sync...")
    try:
        result = service.run_once()
    except PaynowApiError as e:
        logger.error(f"Unexpected API Response: {e.message}")
        return 1

    logger.info(f"Sync OK: total_processed={result.total_processed}, upserted_rows={result.upserted_rows}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

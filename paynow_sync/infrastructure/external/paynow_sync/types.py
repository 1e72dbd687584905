"""
Tipos y utilidades puras para el pipeline PayNow -> Postgres.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from paynow_sync.shared.exceptions import OrderMappingError

# Formato de texto con el que se guarda la columna `completed`
COMPLETED_FORMAT = "%Y-%m-%d %H:%M:%S"


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    PayNow devuelve ISO8601 con 'Z'; si llega sin zona la asumimos UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def normalize_completed_at(value: Any) -> str:
    """
    Convierte un timestamp ISO8601 al texto `YYYY-MM-DD HH:MM:SS` en UTC.

    Los segundos fraccionarios se truncan:
    "2024-03-05T10:22:41.000Z" -> "2024-03-05 10:22:41"
    """
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except (TypeError, ValueError) as e:
            raise OrderMappingError(f"completed_at inválido: {value!r}") from e
    return ensure_utc(dt).strftime(COMPLETED_FORMAT)


@dataclass(frozen=True)
class OrderRecord:
    """Fila de la tabla paynow_orders."""

    order_id: str
    minecraft_uuid: Optional[str]
    subtotal_cents: int
    total_cents: int
    completed_at: str


def map_order_to_record(order: dict[str, Any]) -> OrderRecord:
    """
    Mapea una orden cruda de PayNow a un OrderRecord listo para UPSERT.

    Campos usados: id, customer.minecraft_uuid, subtotal_amount,
    total_amount y completed_at. Si falta el id o el objeto customer la
    orden no se puede mapear y se levanta OrderMappingError.
    """
    order_id = order.get("id")
    if not order_id:
        raise OrderMappingError("PayNow devolvió una orden sin 'id'")

    customer = order.get("customer")
    if not isinstance(customer, dict):
        raise OrderMappingError(
            f"La orden {order_id} no contiene el objeto 'customer'",
            order_id=order_id,
        )

    try:
        subtotal = int(order["subtotal_amount"])
        total = int(order["total_amount"])
    except (KeyError, TypeError, ValueError) as e:
        raise OrderMappingError(
            f"La orden {order_id} tiene importes inválidos", order_id=order_id
        ) from e

    return OrderRecord(
        order_id=str(order_id),
        minecraft_uuid=customer.get("minecraft_uuid") or None,
        subtotal_cents=subtotal,
        total_cents=total,
        completed_at=normalize_completed_at(order.get("completed_at")),
    )

"""
Excepciones del pipeline PayNow -> Postgres.
"""
from typing import Any, Optional

from paynow_sync.shared.exceptions.base import AppException


class ConfigurationError(AppException):
    """Falta configuración obligatoria (API key, store id)."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message=f"Faltan variables de entorno obligatorias: {', '.join(missing)}",
            error_code="CONFIGURATION_ERROR",
            details={"missing": missing}
        )


class PaynowApiError(AppException):
    """La API de PayNow respondió con error o rompió el contrato esperado."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        if body is not None:
            details["body"] = body
        super().__init__(
            message=message,
            error_code="PAYNOW_API_ERROR",
            details=details
        )


class OrderMappingError(AppException):
    """Una orden no tiene la forma esperada y no se puede mapear a fila."""

    def __init__(self, message: str, order_id: Any = None):
        details = {"order_id": str(order_id)} if order_id is not None else None
        super().__init__(
            message=message,
            error_code="ORDER_MAPPING_ERROR",
            details=details
        )

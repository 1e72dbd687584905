"""
Excepción raíz del job de sincronización PayNow -> Postgres.

El entry point captura las subclases esperadas (configuración, contrato de
la API) y las convierte en exit code 1; los fallos de red o de base de datos
no se envuelven y terminan la corrida tal cual.
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Error conocido del job.

    `error_code` identifica el tipo de fallo en los logs y `details` lleva el
    contexto (variables faltantes, status HTTP, id de la orden).
    """

    def __init__(
        self,
        message: str,
        error_code: str = "SYNC_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

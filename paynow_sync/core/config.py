"""
Configuracion central del job.
Gestiona variables de entorno (y .env) para PayNow y la base de datos.
"""
from urllib.parse import quote

from pydantic import AliasChoices, Field, computed_field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Clase de configuracion del job de sincronizacion.
    Lee variables de entorno y proporciona valores por defecto.

    - PAYNOW_STORE_ID (o STORE_ID) y PAYNOW_API_KEY son obligatorias:
      su ausencia se valida antes de tocar red o base de datos.
    - DATABASE_URL se puede especificar completa o por componentes SQL_*
    """

    # PayNow
    PAYNOW_STORE_ID: str = Field(
        default="",
        validation_alias=AliasChoices("PAYNOW_STORE_ID", "STORE_ID"),
    )
    PAYNOW_API_KEY: str = Field(default="")
    PAYNOW_BASE_URL: str = Field(default="https://api.paynow.gg/v1")

    # Paginacion (el limite de la API es 100 por pagina)
    PAGE_SIZE: int = Field(default=100, ge=1, le=100)
    PAGE_DELAY_SECONDS: float = Field(default=0.1, ge=0)

    # Base de datos - Componentes separados
    SQL_HOST: str = Field(default="localhost")
    SQL_PORT: int = Field(default=5432)
    SQL_USER: str = Field(default="postgres")
    SQL_PASSWORD: str = Field(default="")
    SQL_DATABASE: str = Field(default="postgres")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{quote(self.SQL_USER, safe='')}:{quote(self.SQL_PASSWORD, safe='')}"
            f"@{self.SQL_HOST}:{self.SQL_PORT}/{self.SQL_DATABASE}"
        )

    def missing_credentials(self) -> list[str]:
        """Lista las credenciales PayNow obligatorias que no estan definidas."""
        missing = []
        if not self.PAYNOW_API_KEY:
            missing.append("PAYNOW_API_KEY")
        if not self.PAYNOW_STORE_ID:
            missing.append("PAYNOW_STORE_ID")
        return missing

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_settings() -> Settings:
    """Construye la configuracion leyendo el entorno actual."""
    return Settings()

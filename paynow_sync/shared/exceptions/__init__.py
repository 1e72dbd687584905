from paynow_sync.shared.exceptions.base import AppException
from paynow_sync.shared.exceptions.sync import (
    ConfigurationError,
    OrderMappingError,
    PaynowApiError,
)

__all__ = ["AppException", "ConfigurationError", "OrderMappingError", "PaynowApiError"]

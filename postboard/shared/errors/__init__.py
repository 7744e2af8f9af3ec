from .base import (
    AppError,
    CacheUnavailableError,
    DomainError,
    EmailDeliveryError,
    InfrastructureError,
    StorageUnavailableError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "CacheUnavailableError",
    "DomainError",
    "EmailDeliveryError",
    "InfrastructureError",
    "StorageUnavailableError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]

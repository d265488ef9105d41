"""Core module - config, database, document store, exceptions."""

from city_manager.core.config import get_settings, Settings
from city_manager.core.database import Database
from city_manager.core.documents import DocumentStore, to_object_id
from city_manager.core.exceptions import (
    AppException,
    NotFoundException,
    BadRequestException,
    ConflictException,
    StoreUnavailableException,
)

__all__ = [
    "get_settings",
    "Settings",
    "Database",
    "DocumentStore",
    "to_object_id",
    "AppException",
    "NotFoundException",
    "BadRequestException",
    "ConflictException",
    "StoreUnavailableException",
]

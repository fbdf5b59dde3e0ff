# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""consent-store: storage-adapter CRUD core for consent management."""

from .errors import (
    ConflictError,
    ConsentStoreError,
    DatabaseConnectionError,
    DatabaseQueryError,
    FieldNotFoundError,
    HookFailureError,
    InvalidConfigurationError,
    InvalidOperatorUsageError,
    NotFoundError,
    SchemaNotFoundError,
    UnknownStoreError,
)
from .hooks import Abort, Continue, CustomOperation, Transform
from .store import ConsentStore, StoreRegistry
from .store_config import (
    AdvancedOptions,
    CustomBackend,
    MemoryBackend,
    SqlBackend,
    StoreOptions,
    TableOptions,
    config_from_env,
)

__version__ = "0.1.0"

__all__ = [
    "Abort",
    "AdvancedOptions",
    "ConflictError",
    "ConsentStore",
    "ConsentStoreError",
    "Continue",
    "CustomBackend",
    "CustomOperation",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "FieldNotFoundError",
    "HookFailureError",
    "InvalidConfigurationError",
    "InvalidOperatorUsageError",
    "MemoryBackend",
    "NotFoundError",
    "SchemaNotFoundError",
    "SqlBackend",
    "StoreOptions",
    "StoreRegistry",
    "TableOptions",
    "Transform",
    "UnknownStoreError",
    "config_from_env",
]

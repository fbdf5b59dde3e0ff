# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Entity discovery and schema map construction."""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING

from ..errors import InvalidConfigurationError
from .entity import Entity, EntitySchema

if TYPE_CHECKING:
    from ..store_config import StoreOptions

DEFAULT_ENTITY_PACKAGES = ("consent_store.entities",)


def find_entity_classes(package_path: str) -> list[type[Entity]]:
    """Find all Entity classes in a package's entity sub-packages.

    Each sub-package is expected to contain a table.py module; any
    Entity subclass defined there with a non-empty `name` is collected.
    """
    result: list[type[Entity]] = []
    try:
        package = importlib.import_module(package_path)
    except ImportError:
        return result

    package_dir = getattr(package, "__path__", None)
    if not package_dir:
        return result

    for _, name, is_pkg in pkgutil.iter_modules(package_dir):
        if not is_pkg:
            continue
        module_path = f"{package_path}.{name}.table"
        try:
            module = importlib.import_module(module_path)
        except ImportError:
            continue

        for attr_name in dir(module):
            if attr_name.startswith("_"):
                continue
            obj = getattr(module, attr_name)
            if not isinstance(obj, type):
                continue
            if not issubclass(obj, Entity) or obj is Entity:
                continue
            if not getattr(obj, "name", None):
                continue
            result.append(obj)

    return result


def discover_entities(*packages: str) -> dict[str, type[Entity]]:
    """Collect entity classes by name, keeping the most derived class.

    Later packages can extend an entity by subclassing it; the subclass
    replaces the base definition.
    """
    by_name: dict[str, type[Entity]] = {}
    for package_path in packages or DEFAULT_ENTITY_PACKAGES:
        for entity_class in find_entity_classes(package_path):
            existing = by_name.get(entity_class.name)
            if existing is None or issubclass(entity_class, existing):
                by_name[entity_class.name] = entity_class
    return by_name


def get_schema(
    options: StoreOptions | None = None, packages: tuple[str, ...] = ()
) -> dict[str, EntitySchema]:
    """Build the schema map (model name -> EntitySchema).

    Per-table overrides from options.tables are applied here, once.
    Overrides naming an unknown model are rejected.
    """
    entity_classes = discover_entities(*(packages or DEFAULT_ENTITY_PACKAGES))
    tables = options.tables if options is not None else {}

    unknown = set(tables) - set(entity_classes)
    if unknown:
        raise InvalidConfigurationError(
            f"Table options given for unknown models: {', '.join(sorted(unknown))}",
            meta={"unknown": sorted(unknown), "available": sorted(entity_classes)},
        )

    schema: dict[str, EntitySchema] = {}
    for name, entity_class in entity_classes.items():
        schema[name] = entity_class().build_schema(tables.get(name))
    return schema


__all__ = ["DEFAULT_ENTITY_PACKAGES", "discover_entities", "find_entity_classes", "get_schema"]

#!/usr/bin/env python3
"""
catalog.py
----------
Command catalog: the authoritative registry of known commands and their
parameters.

The catalog is built once per run (from a mapping or a JSON/YAML file) and
shared read-only by every validator. A structurally invalid catalog is the
only fatal precondition of the engine: CatalogError is raised before any
document is processed.

Accepted shapes for each entry:
    {"storage.account.list": {"parameters": ["subscription", "tenant"]}}
    {"storage.account.list": {"parameters": [{"name": "subscription"}]}}
    {"storage.account.list": ["subscription", "tenant"]}
    {"storage.account.list": null}            # command without parameters

Usage:
    from tooldocs.catalog import CommandCatalog, load_catalog

    catalog = load_catalog(Path("data/catalog.json"))
    "storage.account.list" in catalog
    catalog.parameters_for("storage.account.list")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterator, Mapping, Optional

# --- Third party imports ---
import yaml

# --- Local imports ---
from tooldocs.core.exceptions import CatalogError


def normalize_parameter(name: str) -> str:
    """
    Normalize a parameter name for catalog lookups.

    Examples:
        >>> normalize_parameter("--Subscription")
        'subscription'
        >>> normalize_parameter("**resource-group**")
        'resource-group'
    """
    return name.strip().strip("*`").lstrip("-").strip().lower()


def parameter_key(name: str) -> str:
    """Spelling-insensitive key: 'resource-group', 'resource_group' and 'resourceGroup' agree."""
    return normalize_parameter(name).replace("-", "").replace("_", "")


@dataclass(frozen=True)
class CommandCatalogEntry:
    """A known command and the names of its parameters (normalized)."""

    name: str
    parameters: FrozenSet[str] = frozenset()

    def has_parameter(self, name: str) -> bool:
        return normalize_parameter(name) in self.parameters


def _entry_parameters(name: str, raw: Any) -> FrozenSet[str]:
    """Extract parameter names from one raw catalog entry."""
    if raw is None:
        return frozenset()
    if isinstance(raw, Mapping):
        if "parameters" not in raw:
            return frozenset()
        raw = raw["parameters"]
        if raw is None:
            return frozenset()
    if isinstance(raw, (str, bytes)) or not hasattr(raw, "__iter__"):
        raise CatalogError(
            f"Entry '{name}' has invalid parameters: expected a collection, "
            f"got {type(raw).__name__}"
        )

    names = set()
    for param in raw:
        if isinstance(param, Mapping):
            param = param.get("name")
        if not isinstance(param, str) or not param.strip():
            raise CatalogError(f"Entry '{name}' has an invalid parameter name: {param!r}")
        names.add(normalize_parameter(param))
    return frozenset(names)


class CommandCatalog(Mapping[str, CommandCatalogEntry]):
    """
    Read-only mapping of command name to CommandCatalogEntry.

    Attributes:
        entries: Underlying name -> entry dictionary
    """

    def __init__(self, entries: Optional[Dict[str, CommandCatalogEntry]] = None) -> None:
        self._entries: Dict[str, CommandCatalogEntry] = dict(entries or {})
        self._namespaces = frozenset(name.split(".", 1)[0] for name in self._entries)
        self._parameter_spellings: Dict[str, str] = {}
        for name in sorted(self._entries):
            for param in sorted(self._entries[name].parameters):
                self._parameter_spellings.setdefault(parameter_key(param), param)

    @classmethod
    def from_mapping(cls, data: Any) -> "CommandCatalog":
        """
        Build a catalog from a mapping of command name to entry.

        Args:
            data: Raw catalog (already decoded)

        Returns:
            CommandCatalog

        Raises:
            CatalogError: If the catalog is not a mapping or an entry is malformed
        """
        if isinstance(data, CommandCatalog):
            return data
        if not isinstance(data, Mapping):
            raise CatalogError(
                f"Catalog must be a mapping of command name to entry, got {type(data).__name__}"
            )

        entries: Dict[str, CommandCatalogEntry] = {}
        for name, raw in data.items():
            if not isinstance(name, str) or not name.strip():
                raise CatalogError(f"Catalog command names must be non-empty strings, got {name!r}")
            if raw is not None and not isinstance(raw, (Mapping, list, tuple, set, frozenset)):
                raise CatalogError(
                    f"Entry '{name}' must be a mapping or a parameter list, got {type(raw).__name__}"
                )
            clean = name.strip()
            entries[clean] = CommandCatalogEntry(clean, _entry_parameters(clean, raw))
        return cls(entries)

    # ----- Mapping interface -----

    def __getitem__(self, name: str) -> CommandCatalogEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CommandCatalog({len(self._entries)} commands)"

    # ----- Queries -----

    @property
    def namespaces(self) -> FrozenSet[str]:
        """First dotted segment of every command name ('storage' for 'storage.account.list')."""
        return self._namespaces

    def parameters_for(self, name: str) -> FrozenSet[str]:
        entry = self._entries.get(name)
        return entry.parameters if entry else frozenset()

    @property
    def parameter_count(self) -> int:
        return sum(len(entry.parameters) for entry in self._entries.values())

    @property
    def parameter_spellings(self) -> Dict[str, str]:
        """Spelling-insensitive parameter key -> catalog spelling."""
        return dict(self._parameter_spellings)


def load_catalog(path: Path) -> CommandCatalog:
    """
    Load a catalog from a JSON or YAML file.

    Args:
        path: .json, .yml or .yaml file

    Returns:
        CommandCatalog

    Raises:
        CatalogError: If the file cannot be read, decoded or validated
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogError(f"Cannot decode catalog {path}: {e}") from e

    return CommandCatalog.from_mapping(data)

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Field-kind metadata for proxy document dataclasses.

Every field of a document type is declared through one of the helpers below.
The helper records how the field combines during a structural merge and
which key it uses in decoded YAML/JSON documents.  The merge engine and the
codec only ever look at this metadata, so a new document type needs no merge
or decode code of its own.

Field kinds
-----------
- **scalar**: strings, numbers, bools, enums; overlay wins when set.
- **composite**: a nested document dataclass; merged field by field.
- **mapping**: ``dict`` of key to scalar or document; merged key by key.
- **keyed_list**: list of documents matched across layers by a key field.
- **scalar_list**: plain list; the overlay replaces it wholesale.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
from typing import Any

_KIND = "proxyctl.kind"
_KEY = "proxyctl.key"
_ITEM = "proxyctl.item"
_MERGE_KEY = "proxyctl.merge_key"


class FieldKind(enum.Enum):
    SCALAR = "scalar"
    COMPOSITE = "composite"
    MAPPING = "mapping"
    KEYED_LIST = "keyed_list"
    SCALAR_LIST = "scalar_list"


class SchemaMismatch(ValueError):
    """Two documents disagree on the shape of the field at *path*."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path or "<root>"
        super().__init__(f"{self.path}: {message}")


def _field(kind: FieldKind, key: str, item: Any = None, merge_key: str | None = None) -> Any:
    # every kind defaults to unset; an empty dict or list is an explicit value
    metadata = {_KIND: kind, _KEY: key, _ITEM: item, _MERGE_KEY: merge_key}
    return dataclasses.field(default=None, metadata=metadata)


def scalar(key: str, item: type | None = None) -> Any:
    """Declare a scalar field.  *item* is an optional enum type for decoding."""
    return _field(FieldKind.SCALAR, key, item)


def composite(key: str, item: type) -> Any:
    """Declare a nested document field of dataclass type *item*."""
    return _field(FieldKind.COMPOSITE, key, item)


def mapping(key: str, item: type | None = None) -> Any:
    """Declare a mapping field; *item* is the value dataclass, if any."""
    return _field(FieldKind.MAPPING, key, item)


def keyed_list(key: str, item: type, merge_key: str) -> Any:
    """Declare a list of *item* documents matched by attribute *merge_key*."""
    return _field(FieldKind.KEYED_LIST, key, item, merge_key)


def scalar_list(key: str) -> Any:
    """Declare a plain list replaced wholesale by the overlay."""
    return _field(FieldKind.SCALAR_LIST, key)


@dataclasses.dataclass(frozen=True)
class FieldSpec:
    """Resolved metadata of one document field."""

    name: str
    kind: FieldKind
    key: str
    item: Any = None
    merge_key: str | None = None


@functools.cache
def document_fields(cls: type) -> tuple[FieldSpec, ...]:
    """Return the :class:`FieldSpec` of every field declared on *cls*.

    Fields declared without a helper are treated as scalars keyed by their
    attribute name.
    """
    specs = []
    for f in dataclasses.fields(cls):
        meta = f.metadata
        specs.append(
            FieldSpec(
                name=f.name,
                kind=meta.get(_KIND, FieldKind.SCALAR),
                key=meta.get(_KEY, f.name),
                item=meta.get(_ITEM),
                merge_key=meta.get(_MERGE_KEY),
            )
        )
    return tuple(specs)


def is_document(value: Any) -> bool:
    """Return True if *value* is a document instance (not a document class)."""
    return dataclasses.is_dataclass(value) and not isinstance(value, type)

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Structural merge of proxy documents.

Domain-agnostic: works on any frozen dataclass declared with the helpers from
``schema``.  The field kind decides how base and overlay combine.

Rules
-----
* **scalar**: the overlay value wins when it is set (not ``None``).
* **composite**: an unset overlay keeps the base, an unset base takes the
  overlay, otherwise both are merged field by field.
* **mapping**: union of keys.  Shared keys follow the scalar/composite rule.
* **keyed_list**: base items keep their position; overlay items with a
  matching key are merged into them, the rest are appended in order.
* **scalar_list**: the overlay replaces the base list wholesale.

Inputs are never mutated.  Containers (dicts, lists, documents) touched by
the merge are newly allocated; untouched sub-documents are shared, which is
safe because documents are frozen.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, TypeVar

from .schema import FieldKind, FieldSpec, SchemaMismatch, document_fields, is_document

D = TypeVar("D")


def merge(base: D, overlay: D) -> D:
    """Merge *overlay* on top of *base* and return a **new** document.

    Raises :class:`SchemaMismatch` if the two documents (or any pair of
    values at the same field position) are not of compatible shape.
    """
    return _merge_document(base, overlay, "")


def _merge_document(base: Any, overlay: Any, path: str) -> Any:
    if not is_document(base) or not is_document(overlay):
        raise SchemaMismatch(
            path, f"expected documents, got {_kind_name(base)} and {_kind_name(overlay)}"
        )
    if type(base) is not type(overlay):
        raise SchemaMismatch(
            path, f"cannot merge {type(overlay).__name__} into {type(base).__name__}"
        )

    changes: dict[str, Any] = {}
    for spec in document_fields(type(base)):
        ov = getattr(overlay, spec.name)
        if ov is None:
            continue
        bv = getattr(base, spec.name)
        changes[spec.name] = _merge_field(spec, bv, ov, _join(path, spec.key))
    return dataclasses.replace(base, **changes)


def _merge_field(spec: FieldSpec, base: Any, overlay: Any, path: str) -> Any:
    """Merge one set overlay value into the base value of a field."""
    if spec.kind is FieldKind.SCALAR:
        _check_scalar(overlay, path)
        if base is not None:
            _check_scalar(base, path)
        return overlay

    if spec.kind is FieldKind.COMPOSITE:
        if base is None:
            if not isinstance(overlay, spec.item):
                raise SchemaMismatch(
                    path, f"expected {spec.item.__name__}, got {_kind_name(overlay)}"
                )
            return overlay
        return _merge_document(base, overlay, path)

    if spec.kind is FieldKind.MAPPING:
        return _merge_mappings(base, overlay, path)

    if spec.kind is FieldKind.KEYED_LIST:
        return _merge_keyed_lists(spec, base, overlay, path)

    # scalar_list: wholesale replace
    if not isinstance(overlay, list):
        raise SchemaMismatch(path, f"expected a list, got {_kind_name(overlay)}")
    if base is not None and not isinstance(base, list):
        raise SchemaMismatch(path, f"expected a list, got {_kind_name(base)}")
    return list(overlay)


def _merge_mappings(base: Any, overlay: Any, path: str) -> dict:
    if not isinstance(overlay, Mapping):
        raise SchemaMismatch(path, f"expected a mapping, got {_kind_name(overlay)}")
    if base is None:
        return dict(overlay)
    if not isinstance(base, Mapping):
        raise SchemaMismatch(path, f"expected a mapping, got {_kind_name(base)}")

    merged = dict(base)
    for key, ov in overlay.items():
        bv = merged.get(key)
        if ov is None:
            continue
        if bv is None:
            merged[key] = ov
        elif is_document(bv) or is_document(ov):
            merged[key] = _merge_document(bv, ov, _join(path, str(key)))
        else:
            _check_scalar(ov, _join(path, str(key)))
            _check_scalar(bv, _join(path, str(key)))
            merged[key] = ov
    return merged


def _merge_keyed_lists(spec: FieldSpec, base: Any, overlay: Any, path: str) -> list:
    if not isinstance(overlay, list):
        raise SchemaMismatch(path, f"expected a list, got {_kind_name(overlay)}")
    if base is None:
        base = []
    elif not isinstance(base, list):
        raise SchemaMismatch(path, f"expected a list, got {_kind_name(base)}")

    merged: list = []
    positions: dict[Any, int] = {}
    for item in base:
        key = _item_key(spec, item, path)
        positions.setdefault(key, len(merged))
        merged.append(item)

    for item in overlay:
        key = _item_key(spec, item, path)
        pos = positions.get(key)
        if pos is None:
            positions[key] = len(merged)
            merged.append(item)
        else:
            merged[pos] = _merge_document(merged[pos], item, f"{path}[{key}]")
    return merged


def _item_key(spec: FieldSpec, item: Any, path: str) -> Any:
    if not isinstance(item, spec.item):
        raise SchemaMismatch(path, f"expected {spec.item.__name__} items, got {_kind_name(item)}")
    key = getattr(item, spec.merge_key)
    if key is None:
        raise SchemaMismatch(path, f"list item is missing its key field '{spec.merge_key}'")
    return key


def _check_scalar(value: Any, path: str) -> None:
    if is_document(value) or isinstance(value, (Mapping, list)):
        raise SchemaMismatch(path, f"expected a scalar, got {_kind_name(value)}")


def _kind_name(value: Any) -> str:
    if is_document(value):
        return type(value).__name__
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, list):
        return "list"
    return type(value).__name__


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key

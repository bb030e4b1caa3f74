# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Conversion between decoded YAML/JSON mappings and proxy documents.

Decoding is strict: unknown keys and wrongly shaped values are rejected with
:class:`InvalidDocumentError` rather than silently dropped.  Encoding emits
the camelCase document keys and omits unset fields.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

import yaml

from .._util.logging_utils import _log_debug
from .schema import FieldKind, document_fields, is_document

D = TypeVar("D")


class InvalidDocumentError(ValueError):
    """A decoded document does not fit the expected document type."""


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def from_dict(cls: type[D], data: Any, path: str = "") -> D:
    """Build a *cls* document from the decoded mapping *data*."""
    if not isinstance(data, Mapping):
        raise InvalidDocumentError(
            f"{path or '<root>'}: expected a mapping for {cls.__name__}, "
            f"got {type(data).__name__}"
        )

    specs = {spec.key: spec for spec in document_fields(cls)}
    unknown = sorted(str(k) for k in data if k not in specs)
    if unknown:
        raise InvalidDocumentError(
            f"{path or '<root>'}: unknown field(s) for {cls.__name__}: {', '.join(unknown)}"
        )

    kwargs: dict[str, Any] = {}
    for key, raw in data.items():
        if raw is None:
            continue
        spec = specs[key]
        field_path = f"{path}.{key}" if path else key
        kwargs[spec.name] = _decode_field(spec.kind, spec.item, raw, field_path)
    return cls(**kwargs)


def _decode_field(kind: FieldKind, item: Any, raw: Any, path: str) -> Any:
    if kind is FieldKind.SCALAR:
        return _decode_scalar(item, raw, path)
    if kind is FieldKind.COMPOSITE:
        return from_dict(item, raw, path)
    if kind is FieldKind.MAPPING:
        if not isinstance(raw, Mapping):
            raise InvalidDocumentError(f"{path}: expected a mapping, got {type(raw).__name__}")
        if item is not None:
            return {k: from_dict(item, v, f"{path}.{k}") for k, v in raw.items()}
        return {k: _decode_scalar(None, v, f"{path}.{k}") for k, v in raw.items()}

    if not isinstance(raw, list):
        raise InvalidDocumentError(f"{path}: expected a list, got {type(raw).__name__}")
    if kind is FieldKind.KEYED_LIST:
        return [from_dict(item, v, f"{path}[{i}]") for i, v in enumerate(raw)]
    return [_decode_scalar(None, v, f"{path}[{i}]") for i, v in enumerate(raw)]


def _decode_scalar(enum_type: Any, raw: Any, path: str) -> Any:
    if raw is None:
        raise InvalidDocumentError(f"{path}: null is not allowed here")
    if isinstance(raw, (Mapping, list)):
        raise InvalidDocumentError(f"{path}: expected a scalar, got {type(raw).__name__}")
    if enum_type is None:
        return raw
    try:
        return enum_type(raw)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_type)
        raise InvalidDocumentError(f"{path}: invalid value {raw!r} (allowed: {allowed})") from None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def to_dict(doc: Any) -> dict:
    """Return *doc* as a plain mapping with document keys, omitting unset fields."""
    out: dict = {}
    for spec in document_fields(type(doc)):
        value = getattr(doc, spec.name)
        if value is not None:
            out[spec.key] = _encode(value)
    return out


def _encode(value: Any) -> Any:
    if is_document(value):
        return to_dict(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Mapping):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_encode(v) for v in value]
    return value


def dump_yaml(doc: Any) -> str:
    """Render *doc* as a YAML string, keeping field order."""
    return yaml.safe_dump(to_dict(doc), sort_keys=False, default_flow_style=False)


def dump_json(doc: Any) -> str:
    return json.dumps(to_dict(doc), indent=2)


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidDocumentError(f"{path}: not valid UTF-8: {e}") from e
    except OSError as e:
        raise InvalidDocumentError(f"{path}: cannot read: {e}") from e


def load_yaml_document(path: Path, cls: type[D]) -> D | None:
    """Load a YAML file into a *cls* document.  Returns None if missing or empty."""
    if not path.is_file():
        _log_debug(f"load_yaml_document: {path} not found")
        return None
    try:
        data = yaml.safe_load(_read_text(path))
    except yaml.YAMLError as e:
        raise InvalidDocumentError(f"{path}: invalid YAML: {e}") from e
    if not data:
        return None
    _log_debug(f"load_yaml_document: {path} as {cls.__name__}")
    return from_dict(cls, data)


def load_json_document(path: Path, cls: type[D]) -> D | None:
    """Load a JSON file into a *cls* document.  Returns None if missing or empty."""
    if not path.is_file():
        _log_debug(f"load_json_document: {path} not found")
        return None
    text = _read_text(path)
    if not text.strip():
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDocumentError(f"{path}: invalid JSON: {e}") from e
    if not data:
        return None
    _log_debug(f"load_json_document: {path} as {cls.__name__}")
    return from_dict(cls, data)


def load_document(path: Path, cls: type[D]) -> D | None:
    """Load *path* as JSON when it ends in ``.json``, otherwise as YAML."""
    if path.suffix.lower() == ".json":
        return load_json_document(path, cls)
    return load_yaml_document(path, cls)

"""Typed field access for scene objects.

Scene mutation itself lives in the host editor.  This module only defines
the capability the assistant is given instead of free-form reflection:

  list_fields(obj)              → names that may be written
  set_field(obj, name, value)   → FieldResult

String values coming from a model reply are converted with
:func:`coerce_value` according to the declared ``FieldType``:

  bool     "true" / "false" (any case)
  int      decimal integer
  float    decimal or exponent notation
  string   unchanged
  vector2  "x,y"
  vector3  "x,y,z"
  color    "r,g,b" or "r,g,b,a" (alpha defaults to 1.0)
  enum     member name of the supplied ``Enum`` class

Every failure is a ``ConversionError``; nothing else escapes ``set_field``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Protocol

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    VECTOR2 = "vector2"
    VECTOR3 = "vector3"
    COLOR = "color"
    ENUM = "enum"


class Vector2(NamedTuple):
    x: float
    y: float


class Vector3(NamedTuple):
    x: float
    y: float
    z: float


class Color(NamedTuple):
    r: float
    g: float
    b: float
    a: float = 1.0


class ConversionError(ValueError):
    """A raw string could not be converted to the field's declared type."""

    def __init__(self, field_type: FieldType, raw: str, reason: str) -> None:
        self.field_type = field_type
        self.raw = raw
        self.reason = reason
        super().__init__(f"Cannot convert {raw!r} to {field_type.value}: {reason}")


@dataclass(frozen=True)
class FieldSpec:
    """Declared type of one writable field."""

    name: str
    field_type: FieldType
    enum_type: type[Enum] | None = None


@dataclass(frozen=True)
class FieldResult:
    """Outcome of a ``set_field`` call."""

    success: bool
    field: str
    value: Any = None
    error: str | None = None


# ── Conversion ────────────────────────────────────────────────────────────────

def _parse_float(raw: str, field_type: FieldType, whole: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise ConversionError(field_type, whole, f"{raw.strip()!r} is not a number") from None


def _parse_components(raw: str, field_type: FieldType, counts: tuple[int, ...]) -> list[float]:
    parts = raw.strip().split(",")
    if len(parts) not in counts:
        expected = " or ".join(str(c) for c in counts)
        raise ConversionError(
            field_type, raw, f"expected {expected} comma-separated components, got {len(parts)}"
        )
    return [_parse_float(p, field_type, raw) for p in parts]


def coerce_value(
    raw: str,
    field_type: FieldType,
    enum_type: type[Enum] | None = None,
) -> Any:
    """Convert *raw* to the Python value for *field_type*."""
    if field_type is FieldType.STRING:
        return raw

    if field_type is FieldType.BOOL:
        lowered = raw.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise ConversionError(field_type, raw, "expected 'true' or 'false'")

    if field_type is FieldType.INT:
        try:
            return int(raw.strip())
        except ValueError:
            raise ConversionError(field_type, raw, "not an integer") from None

    if field_type is FieldType.FLOAT:
        return _parse_float(raw, field_type, raw)

    if field_type is FieldType.VECTOR2:
        return Vector2(*_parse_components(raw, field_type, (2,)))

    if field_type is FieldType.VECTOR3:
        return Vector3(*_parse_components(raw, field_type, (3,)))

    if field_type is FieldType.COLOR:
        return Color(*_parse_components(raw, field_type, (3, 4)))

    if field_type is FieldType.ENUM:
        if enum_type is None:
            raise ConversionError(field_type, raw, "no enum type declared for field")
        try:
            return enum_type[raw.strip()]
        except KeyError:
            members = ", ".join(m.name for m in enum_type)
            raise ConversionError(field_type, raw, f"expected one of: {members}") from None

    raise ConversionError(field_type, raw, "unsupported field type")


# ── Capability interface ──────────────────────────────────────────────────────

class FieldAccessor(Protocol):
    """What the assistant may do to a live object's fields."""

    def list_fields(self, obj: Any) -> list[str]:
        """Return writable field names of *obj*."""

    def set_field(self, obj: Any, name: str, value: str) -> FieldResult:
        """Convert *value* and assign it to field *name* of *obj*."""


class ObjectFieldAccessor:
    """``FieldAccessor`` over plain Python objects.

    Only fields declared in *specs* are visible or writable, keyed by the
    object's class name.
    """

    def __init__(self, specs: dict[str, list[FieldSpec]]) -> None:
        self._specs = {
            type_name: {spec.name: spec for spec in fields}
            for type_name, fields in specs.items()
        }

    def _fields_for(self, obj: Any) -> dict[str, FieldSpec]:
        return self._specs.get(type(obj).__name__, {})

    def list_fields(self, obj: Any) -> list[str]:
        return list(self._fields_for(obj))

    def set_field(self, obj: Any, name: str, value: str) -> FieldResult:
        spec = self._fields_for(obj).get(name)
        if spec is None:
            return FieldResult(
                success=False,
                field=name,
                error=f"{type(obj).__name__} has no writable field {name!r}",
            )
        try:
            converted = coerce_value(value, spec.field_type, spec.enum_type)
        except ConversionError as exc:
            logger.warning("Field %s.%s: %s", type(obj).__name__, name, exc)
            return FieldResult(success=False, field=name, error=str(exc))

        setattr(obj, name, converted)
        logger.debug("Set %s.%s = %r", type(obj).__name__, name, converted)
        return FieldResult(success=True, field=name, value=converted)

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List, Optional

from .symbols import Symbol


class TypeFlags(Enum):
    ANY = auto()
    UNKNOWN = auto()
    NEVER = auto()
    STRING = auto()
    NUMBER = auto()
    BIGINT = auto()
    BOOLEAN = auto()
    STRING_LITERAL = auto()
    NUMBER_LITERAL = auto()
    BIGINT_LITERAL = auto()
    BOOLEAN_LITERAL = auto()
    NULL = auto()
    UNDEFINED = auto()
    OBJECT = auto()
    UNION = auto()


class ObjectFlags(Enum):
    NONE = auto()
    REFERENCE = auto()  # Array<T>, ReadonlyArray<T>, tuples
    ANONYMOUS = auto()  # object literals, type literals, functions
    INTERFACE = auto()
    CLASS = auto()


_LITERAL_WIDENING = {
    TypeFlags.STRING_LITERAL: TypeFlags.STRING,
    TypeFlags.NUMBER_LITERAL: TypeFlags.NUMBER,
    TypeFlags.BIGINT_LITERAL: TypeFlags.BIGINT,
    TypeFlags.BOOLEAN_LITERAL: TypeFlags.BOOLEAN,
}


@dataclass(eq=False)
class Type:
    flags: TypeFlags
    value: Any = None  # literal types only
    object_flags: ObjectFlags = ObjectFlags.NONE
    symbol: Optional[Symbol] = None
    target: Optional[str] = None  # "Array" | "ReadonlyArray" | "tuple" for references
    type_arguments: List["Type"] = field(default_factory=list)
    types: List["Type"] = field(default_factory=list)  # union members
    readonly: bool = False

    @property
    def is_literal(self) -> bool:
        return self.flags in _LITERAL_WIDENING

    def widened(self) -> "Type":
        """The base primitive of a literal type ("a" -> string); other types unchanged."""
        base = _LITERAL_WIDENING.get(self.flags)
        if base is None:
            return self
        return Type(base)

    def __repr__(self) -> str:
        if self.is_literal:
            return f"Type({self.flags.name}, {self.value!r})"
        if self.object_flags is ObjectFlags.REFERENCE:
            return f"Type({self.target}<{', '.join(repr(a) for a in self.type_arguments)}>)"
        return f"Type({self.flags.name})"


def literal_type(flags: TypeFlags, value: Any) -> Type:
    return Type(flags, value=value)


def reference_type(target: str, arguments: List[Type], readonly: bool = False) -> Type:
    return Type(
        TypeFlags.OBJECT,
        object_flags=ObjectFlags.REFERENCE,
        target=target,
        type_arguments=list(arguments),
        readonly=readonly,
    )


def anonymous_type(symbol: Optional[Symbol], object_flags: ObjectFlags = ObjectFlags.ANONYMOUS) -> Type:
    return Type(TypeFlags.OBJECT, object_flags=object_flags, symbol=symbol)


def union_type(members: List[Type]) -> Type:
    flat: List[Type] = []
    seen = set()
    for m in members:
        for t in (m.types if m.flags is TypeFlags.UNION else [m]):
            # primitives and literals collapse by value; object types stay distinct
            key = id(t) if t.flags is TypeFlags.OBJECT else (t.flags, t.value)
            if key in seen:
                continue
            seen.add(key)
            flat.append(t)
    if not flat:
        return Type(TypeFlags.NEVER)
    if len(flat) == 1:
        return flat[0]
    return Type(TypeFlags.UNION, types=flat)


UNKNOWN_TYPE = Type(TypeFlags.UNKNOWN)
ANY_TYPE = Type(TypeFlags.ANY)

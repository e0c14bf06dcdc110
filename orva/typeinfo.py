"""
Type descriptors for schema derivation.

The schema deriver does not use Python reflection directly. It works on
``TypeInfo`` descriptors which answer a small set of questions about a type:
its name and namespace, which kind of type it is, its generic arguments,
its public fields and, for enumerations, its symbols.

``PyTypeInfo`` answers these questions for Python types using ``typing``,
``dataclasses``, ``enum`` and ``collections.abc``. Other type systems can be
plugged in by implementing ``TypeInfo``.
"""

# pylint: disable=too-many-return-statements

import collections.abc
import ctypes
import dataclasses
import datetime
import decimal
import enum
import inspect
import types
import typing
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, NamedTuple

from orva.markers import Byte, Float32, Float64, Int32, Int64


class TypeKind(enum.Enum):
    """The categories the schema deriver dispatches on."""
    NULL = 'null'
    BOOLEAN = 'boolean'
    STRING = 'string'
    LONG = 'long'
    INT = 'int'
    FLOAT = 'float'
    DOUBLE = 'double'
    BYTES = 'bytes'
    GUID = 'guid'
    DECIMAL = 'decimal'
    TIMESTAMP = 'timestamp'
    DURATION = 'duration'
    NULLABLE = 'nullable'
    UNION = 'union'
    ENUM = 'enum'
    SEQUENCE = 'sequence'
    MAP = 'map'
    ANY = 'any'
    TYPEVAR = 'typevar'
    RECORD = 'record'


PRIMITIVE_KINDS = frozenset({
    TypeKind.NULL, TypeKind.BOOLEAN, TypeKind.STRING, TypeKind.LONG,
    TypeKind.INT, TypeKind.FLOAT, TypeKind.DOUBLE, TypeKind.BYTES,
})

# Python types with a fixed kind, matched by identity
SCALAR_KINDS: Dict[Any, TypeKind] = {
    type(None): TypeKind.NULL,
    bool: TypeKind.BOOLEAN,
    ctypes.c_bool: TypeKind.BOOLEAN,
    str: TypeKind.STRING,
    int: TypeKind.LONG,
    Int64: TypeKind.LONG,
    ctypes.c_int64: TypeKind.LONG,
    ctypes.c_longlong: TypeKind.LONG,
    Int32: TypeKind.INT,
    ctypes.c_int32: TypeKind.INT,
    ctypes.c_int: TypeKind.INT,
    Float32: TypeKind.FLOAT,
    ctypes.c_float: TypeKind.FLOAT,
    float: TypeKind.DOUBLE,
    Float64: TypeKind.DOUBLE,
    ctypes.c_double: TypeKind.DOUBLE,
    bytes: TypeKind.BYTES,
    bytearray: TypeKind.BYTES,
    memoryview: TypeKind.BYTES,
    Byte: TypeKind.BYTES,
    ctypes.c_byte: TypeKind.BYTES,
    ctypes.c_ubyte: TypeKind.BYTES,
    uuid.UUID: TypeKind.GUID,
    decimal.Decimal: TypeKind.DECIMAL,
    datetime.datetime: TypeKind.TIMESTAMP,
    datetime.timedelta: TypeKind.DURATION,
}

NO_NAMESPACE_MODULES = ('builtins', '__main__')


class FieldInfo(NamedTuple):
    """A public field of a record type."""
    name: str
    type_info: 'TypeInfo'


class TypeInfo(ABC):
    """Reflection capability consumed by the schema deriver."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The simple name of the type."""

    @property
    @abstractmethod
    def namespace(self) -> str:
        """The declaring namespace of the type, '' if it has none."""

    @property
    @abstractmethod
    def kind(self) -> TypeKind:
        """The category of the type."""

    @abstractmethod
    def generic_args(self) -> List['TypeInfo']:
        """The generic type arguments. For nullable types, the wrapped type only."""

    @abstractmethod
    def fields(self) -> List[FieldInfo]:
        """The public instance fields in declaration order."""

    def symbols(self) -> List[str]:
        """The enumerator names in declaration order."""
        return []


def _is_union(t) -> bool:
    origin = typing.get_origin(t)
    return origin is typing.Union or origin is types.UnionType


def _is_newtype(t) -> bool:
    return isinstance(t, typing.NewType)


def _substitute(hint, arguments: Dict[Any, Any]):
    """Replace type variables in a hint with the arguments bound to them."""
    if not arguments:
        return hint
    if isinstance(hint, typing.TypeVar):
        return arguments.get(hint, hint)
    parameters = getattr(hint, '__parameters__', ())
    if parameters:
        return hint[tuple(arguments.get(p, p) for p in parameters)]
    return hint


def classify(t) -> TypeKind:
    """Determine the kind of a Python type."""
    if t is None:
        return TypeKind.NULL
    kind = SCALAR_KINDS.get(t)
    if kind is not None:
        return kind
    if _is_newtype(t):
        return classify(t.__supertype__)
    if t is typing.Any:
        return TypeKind.ANY
    if isinstance(t, typing.TypeVar):
        return TypeKind.TYPEVAR
    if _is_union(t):
        args = typing.get_args(t)
        if len(args) == 2 and type(None) in args:
            return TypeKind.NULLABLE
        return TypeKind.UNION
    if typing.is_typeddict(t):
        return TypeKind.RECORD
    origin = typing.get_origin(t)
    candidate = origin if origin is not None else t
    if not inspect.isclass(candidate):
        raise TypeError(f"{t!r} is not a type")
    if issubclass(candidate, enum.Enum):
        return TypeKind.ENUM
    if issubclass(candidate, tuple) and hasattr(candidate, '_fields'):
        return TypeKind.RECORD
    if issubclass(candidate, collections.abc.Mapping):
        return TypeKind.MAP
    if issubclass(candidate, collections.abc.Iterable):
        return TypeKind.SEQUENCE
    return TypeKind.RECORD


class PyTypeInfo(TypeInfo):
    """``TypeInfo`` backed by a Python type or type annotation."""

    def __init__(self, t):
        if t is None:
            t = type(None)
        while _is_newtype(t) and t not in SCALAR_KINDS:
            t = t.__supertype__
        self.py_type = t
        self._kind = classify(t)

    @property
    def _class(self):
        origin = typing.get_origin(self.py_type)
        return origin if origin is not None else self.py_type

    @property
    def name(self) -> str:
        if self._kind == TypeKind.NULL:
            return 'null'
        if self._kind in (TypeKind.NULLABLE, TypeKind.UNION):
            return str(self.py_type)
        return getattr(self._class, '__name__', str(self.py_type))

    @property
    def namespace(self) -> str:
        cls = self._class
        namespace = getattr(cls, '__avro_namespace__', None)
        if namespace is not None:
            return namespace
        module = getattr(cls, '__module__', '') or ''
        return '' if module in NO_NAMESPACE_MODULES else module

    @property
    def kind(self) -> TypeKind:
        return self._kind

    def generic_args(self) -> List[TypeInfo]:
        args = typing.get_args(self.py_type)
        if self._kind == TypeKind.NULLABLE:
            args = tuple(a for a in args if a is not type(None))
        return [PyTypeInfo(a) for a in args]

    def _type_arguments(self) -> Dict[Any, Any]:
        """Map the type variables of a parameterized class to its arguments."""
        parameters = getattr(self._class, '__parameters__', ())
        return dict(zip(parameters, typing.get_args(self.py_type)))

    def fields(self) -> List[FieldInfo]:
        if self._kind != TypeKind.RECORD:
            return []
        cls = self._class
        localns = {cls.__name__: cls}
        arguments = self._type_arguments()
        hints = typing.get_type_hints(cls, localns=localns)
        if dataclasses.is_dataclass(cls):
            names = [f.name for f in dataclasses.fields(cls)]
        else:
            names = [n for n, h in hints.items() if typing.get_origin(h) is not typing.ClassVar]
        result = [FieldInfo(n, PyTypeInfo(_substitute(hints[n], arguments))) for n in names if not n.startswith('_')]
        seen = set(names)
        for klass in reversed(cls.__mro__):
            for attr_name, member in vars(klass).items():
                if attr_name in seen or attr_name.startswith('_') or not isinstance(member, property):
                    continue
                return_type = typing.get_type_hints(member.fget, localns=localns).get('return') if member.fget else None
                if return_type is None:
                    continue
                seen.add(attr_name)
                result.append(FieldInfo(attr_name, PyTypeInfo(_substitute(return_type, arguments))))
        return result

    def symbols(self) -> List[str]:
        if self._kind != TypeKind.ENUM:
            return []
        return list(self._class.__members__)

    def __eq__(self, other):
        return isinstance(other, PyTypeInfo) and self.py_type == other.py_type

    def __hash__(self):
        return hash(self.py_type)

    def __repr__(self):
        return f"PyTypeInfo({self.py_type!r})"


def type_info(t) -> TypeInfo:
    """Wrap a Python type in a ``TypeInfo`` unless it already is one."""
    if isinstance(t, TypeInfo):
        return t
    return PyTypeInfo(t)

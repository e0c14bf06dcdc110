"""
Derive Avro schemas from Python types.

The deriver walks a type graph and produces an Avro JSON schema:

- Primitives (str, int, float, bool, bytes, None and the markers in
  ``orva.markers``) map to fixed primitive schemas.
- UUID, Decimal and datetime map to fixed-size ``fixed`` logical types.
- Optional[X] maps to a union of the name of X and null.
- Enum classes map to ``enum`` schemas.
- Any other class maps to a ``record`` with one field per public field.

Within one call every non-primitive type is expanded once; later occurrences
of the same type are emitted as references, so self-referential and repeated
types terminate. Durations, sequences, maps, general unions, Any and unbound
type variables are rejected, also when wrapped in Optional.
"""

import importlib
import logging
from typing import Optional, Set, Tuple

from orva.avroschema import (AvroSchemaFragment, EnumSchema, FieldSchema,
                             FixedSchema, NullableSchema, PrimitiveSchema,
                             RecordSchema, ReferenceSchema, qualified_name,
                             render)
from orva.typeinfo import PRIMITIVE_KINDS, TypeInfo, TypeKind, type_info

# Configure module logger
logger = logging.getLogger(__name__)

# Maximum nesting of record expansion (prevents stack overflow)
MAX_DERIVATION_DEPTH = 100

# Name aliases for types that have no namespace in Avro
TYPE_ALIASES = {
    TypeKind.NULL: 'null',
    TypeKind.BOOLEAN: 'boolean',
    TypeKind.STRING: 'string',
    TypeKind.LONG: 'long',
    TypeKind.INT: 'int',
    TypeKind.FLOAT: 'float',
    TypeKind.DOUBLE: 'double',
    TypeKind.BYTES: 'bytes',
    TypeKind.GUID: 'guid',
    TypeKind.DECIMAL: 'decimal',
    TypeKind.TIMESTAMP: 'utcdatetime',
}

# Logical types carried as fixed: kind -> (name, size)
FIXED_LOGICAL_TYPES = {
    TypeKind.GUID: ('guid', 16),
    TypeKind.DECIMAL: ('decimal', 16),
    TypeKind.TIMESTAMP: ('utcdatetime', 8),
}

# Kinds that are always emitted in full and never tracked as traversed
UNTRACKED_KINDS = PRIMITIVE_KINDS | {TypeKind.NULLABLE}


class AvroSchemaError(Exception):
    """
    Exception raised when a schema cannot be derived.

    Attributes:
        message: Human-readable error description
        type_name: Qualified name of the type that caused the error, if known
    """

    def __init__(self, message: str, type_name: Optional[str] = None) -> None:
        self.message = message
        self.type_name = type_name
        if type_name:
            super().__init__(f"{message}: {type_name}")
        else:
            super().__init__(message)


class SchemaNotSupportedError(AvroSchemaError):
    """Raised for a recognized type that is intentionally not handled."""


class SchemaNotImplementedError(AvroSchemaError, NotImplementedError):
    """Raised for sequence-like, map-like, general union, Any and type variable types."""


def primitive_schema(t) -> Optional[PrimitiveSchema]:
    """Return the primitive schema for t, or None if t is not a primitive."""
    info = type_info(t)
    if info.kind in PRIMITIVE_KINDS:
        return PrimitiveSchema(TYPE_ALIASES[info.kind])
    return None


def type_name_and_namespace(t) -> Tuple[str, str]:
    """
    Resolve the (namespace, name) pair of a type.

    Primitives and the guid, decimal and timestamp logical types resolve to
    their Avro alias with an empty namespace. All other types resolve to
    their declared namespace and simple name.
    """
    info = type_info(t)
    alias = TYPE_ALIASES.get(info.kind)
    if alias is not None:
        return '', alias
    return info.namespace, info.name


class TypeToAvroConverter:
    """
    Derives the schema of one type.

    An instance holds the set of types traversed so far and is meant for a
    single top-level derivation.
    """

    def __init__(self) -> None:
        self.traversed_types: Set[TypeInfo] = set()
        self._depth = 0

    def derive(self, info: TypeInfo) -> AvroSchemaFragment:
        """Derive the schema fragment of a type, recording it as traversed."""
        if info.kind in PRIMITIVE_KINDS:
            return PrimitiveSchema(TYPE_ALIASES[info.kind])
        if info.kind == TypeKind.NULLABLE:
            wrapped = info.generic_args()[0]
            self._reject_unsupported(wrapped)
            return NullableSchema(qualified_name(*type_name_and_namespace(wrapped)))
        if info in self.traversed_types:
            namespace, name = type_name_and_namespace(info)
            logger.debug("Referencing already traversed type %s", qualified_name(namespace, name))
            return ReferenceSchema(name, namespace)
        fragment = self._derive_complex_type(info)
        self.traversed_types.add(info)
        return fragment

    def _derive_complex_type(self, info: TypeInfo) -> AvroSchemaFragment:
        kind = info.kind
        if kind in FIXED_LOGICAL_TYPES:
            name, size = FIXED_LOGICAL_TYPES[kind]
            return FixedSchema(name, size)
        if kind == TypeKind.ENUM:
            return EnumSchema(info.name, info.namespace, info.symbols())
        self._reject_unsupported(info)
        return self._derive_record(info)

    def _reject_unsupported(self, info: TypeInfo) -> None:
        kind = info.kind
        if kind == TypeKind.DURATION:
            raise SchemaNotSupportedError("Durations are not supported", self._describe(info))
        if kind == TypeKind.SEQUENCE:
            raise SchemaNotImplementedError("Sequence types are not implemented", self._describe(info))
        if kind == TypeKind.MAP:
            raise SchemaNotImplementedError("Map types are not implemented", self._describe(info))
        if kind == TypeKind.UNION:
            raise SchemaNotImplementedError("Union types other than Optional are not implemented", self._describe(info))
        if kind == TypeKind.ANY:
            raise SchemaNotImplementedError("Untyped values are not implemented", self._describe(info))
        if kind == TypeKind.TYPEVAR:
            raise SchemaNotImplementedError("Unbound type variables are not implemented", self._describe(info))

    def _derive_record(self, info: TypeInfo) -> RecordSchema:
        namespace, name = type_name_and_namespace(info)
        self._depth += 1
        if self._depth > MAX_DERIVATION_DEPTH:
            self._depth -= 1
            logger.warning("Maximum derivation depth exceeded for type: %s", qualified_name(namespace, name))
            raise AvroSchemaError(f"Maximum derivation depth ({MAX_DERIVATION_DEPTH}) exceeded",
                                  qualified_name(namespace, name))
        try:
            logger.debug("Expanding record %s", qualified_name(namespace, name))
            # the record is known before its fields so that self references terminate
            self.traversed_types.add(info)
            record = RecordSchema(name, namespace)
            for field_info in info.fields():
                field_type = field_info.type_info
                if field_type.kind not in UNTRACKED_KINDS and field_type in self.traversed_types:
                    record.fields.append(FieldSchema(field_info.name, qualified_name(*type_name_and_namespace(field_type))))
                else:
                    record.fields.append(FieldSchema(field_info.name, self.derive(field_type)))
            return record
        finally:
            self._depth -= 1

    @staticmethod
    def _describe(info: TypeInfo) -> str:
        return qualified_name(info.namespace, info.name)


def get_schema_fragment(t) -> AvroSchemaFragment:
    """
    Derive the structured schema fragment of a type.

    Args:
        t: A Python type, a ``TypeInfo`` or None for the null type.

    Returns:
        The schema fragment.
    """
    return TypeToAvroConverter().derive(type_info(t))


def get_schema(t, embed_field_schemas: bool = True) -> str:
    """
    Produce the Avro schema of a type as compact JSON text.

    Args:
        t: A Python type, a ``TypeInfo`` or None for the null type.
        embed_field_schemas: When True, record field schemas are embedded as
            JSON strings. When False, they are nested as JSON objects.

    Returns:
        The Avro schema.

    Raises:
        SchemaNotSupportedError: If t is or contains a duration.
        SchemaNotImplementedError: If t is or contains a sequence, map or
            non-optional union.
    """
    return render(get_schema_fragment(t), embed_field_schemas)


def load_type(type_path: str):
    """
    Load a type from a path of the form ``package.module:Qualified.Name``.

    A path without ':' is split at the last '.'.
    """
    if ':' in type_path:
        module_name, qualname = type_path.split(':', 1)
    else:
        module_name, _, qualname = type_path.rpartition('.')
    if not module_name or not qualname:
        raise AvroSchemaError("Invalid type path", type_path)
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise AvroSchemaError(f"Cannot import module {module_name}", type_path) from e
    for part in qualname.split('.'):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise AvroSchemaError(f"Cannot find {part} in {module_name}", type_path) from e
    return obj


def convert_type_to_avro_schema(type_path: str, avro_file_path: str, embed_field_schemas: bool = True) -> None:
    """Derive the schema of the type at type_path and save it to a file."""
    if not type_path:
        raise ValueError("Type path is required.")
    schema = get_schema(load_type(type_path), embed_field_schemas)
    with open(avro_file_path, 'w', encoding='utf-8') as avro_file:
        avro_file.write(schema)

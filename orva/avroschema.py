"""
Structured Avro schema fragments.

The deriver builds a tree of fragments and renders it once at the end. Each
fragment knows its JSON form; ``render`` turns a fragment into the compact
JSON text consumers compare literally.
"""

import json
from dataclasses import dataclass, field
from typing import Any, List, Union


def qualified_name(namespace: str, name: str) -> str:
    """Join a namespace and a name with '.', omitting an empty namespace."""
    return f"{namespace}.{name}" if namespace else name


def render_json(value: Any) -> str:
    """Render JSON data without any insignificant whitespace."""
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False)


@dataclass
class PrimitiveSchema:
    """A built-in Avro primitive such as ``int`` or ``string``."""
    type: str

    def to_json(self, embed_field_schemas: bool = True) -> Any:
        return {"type": self.type}


@dataclass
class ReferenceSchema:
    """A back reference to a type that was already expanded."""
    name: str
    namespace: str = ''

    def to_json(self, embed_field_schemas: bool = True) -> Any:
        result = {"type": self.name}
        if self.namespace:
            result["namespace"] = self.namespace
        return result


@dataclass
class FixedSchema:
    """A logical type carried as an Avro ``fixed``."""
    name: str
    size: int

    def to_json(self, embed_field_schemas: bool = True) -> Any:
        return {"type": "fixed", "size": self.size, "name": self.name}


@dataclass
class EnumSchema:
    name: str
    namespace: str
    symbols: List[str] = field(default_factory=list)

    def to_json(self, embed_field_schemas: bool = True) -> Any:
        return {"type": "enum", "name": self.name, "namespace": self.namespace, "symbols": list(self.symbols)}


@dataclass
class NullableSchema:
    """A union of a named type and null."""
    type_name: str

    def to_json(self, embed_field_schemas: bool = True) -> Any:
        return [self.type_name, None]


@dataclass
class FieldSchema:
    """
    A record field.

    ``type`` is either a nested fragment or the qualified name of a type that
    was already expanded.
    """
    name: str
    type: Union['AvroSchemaFragment', str]

    def to_json(self, embed_field_schemas: bool = True) -> Any:
        if isinstance(self.type, str):
            field_type = self.type
        elif embed_field_schemas:
            field_type = render(self.type, embed_field_schemas)
        else:
            field_type = self.type.to_json(embed_field_schemas)
        return {"name": self.name, "type": field_type}


@dataclass
class RecordSchema:
    name: str
    namespace: str = ''
    fields: List[FieldSchema] = field(default_factory=list)

    def to_json(self, embed_field_schemas: bool = True) -> Any:
        result = {"type": "record", "name": self.name}
        if self.namespace:
            result["namespace"] = self.namespace
        result["fields"] = [f.to_json(embed_field_schemas) for f in self.fields]
        return result


AvroSchemaFragment = Union[PrimitiveSchema, ReferenceSchema, FixedSchema,
                           EnumSchema, NullableSchema, RecordSchema]


def render(fragment: AvroSchemaFragment, embed_field_schemas: bool = True) -> str:
    """
    Render a fragment to compact JSON text.

    Args:
        fragment: The schema fragment to render.
        embed_field_schemas: When True, nested field schemas are rendered to
            text and embedded as JSON strings. When False, they are emitted as
            nested JSON objects.

    Returns:
        The JSON text.
    """
    return render_json(fragment.to_json(embed_field_schemas))

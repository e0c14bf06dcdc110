"""
Tests for the type descriptors used by schema derivation.
"""

import datetime
import decimal
import os
import sys
import unittest
import uuid
from typing import Any, Dict, List, Optional, Union

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)
sys.path.append(os.path.dirname(current_script_path))

from orva.markers import Float32, Int32
from orva.typeinfo import FieldInfo, PyTypeInfo, TypeInfo, TypeKind, classify, type_info
from orva.typetoavro import get_schema
from fixtures.shapes import Box, Color, Countdown, Dog, Movie, Node, Pair, Point, Settings, Size, T, Temperature


class RecordInfo(TypeInfo):
    """A descriptor that does not come from Python reflection."""

    def __init__(self, name, namespace, fields):
        self._name = name
        self._namespace = namespace
        self._fields = fields

    @property
    def name(self):
        return self._name

    @property
    def namespace(self):
        return self._namespace

    @property
    def kind(self):
        return TypeKind.RECORD

    def generic_args(self):
        return []

    def fields(self):
        return self._fields


class TestClassify(unittest.TestCase):

    def test_scalar_kinds(self):
        self.assertEqual(TypeKind.NULL, classify(None))
        self.assertEqual(TypeKind.BOOLEAN, classify(bool))
        self.assertEqual(TypeKind.LONG, classify(int))
        self.assertEqual(TypeKind.INT, classify(Int32))
        self.assertEqual(TypeKind.FLOAT, classify(Float32))
        self.assertEqual(TypeKind.GUID, classify(uuid.UUID))
        self.assertEqual(TypeKind.DECIMAL, classify(decimal.Decimal))
        self.assertEqual(TypeKind.TIMESTAMP, classify(datetime.datetime))
        self.assertEqual(TypeKind.DURATION, classify(datetime.timedelta))

    def test_structured_kinds(self):
        self.assertEqual(TypeKind.NULLABLE, classify(Optional[Point]))
        self.assertEqual(TypeKind.UNION, classify(Union[int, str, None]))
        self.assertEqual(TypeKind.ENUM, classify(Color))
        self.assertEqual(TypeKind.SEQUENCE, classify(List[int]))
        self.assertEqual(TypeKind.MAP, classify(Dict[str, int]))
        self.assertEqual(TypeKind.RECORD, classify(Point))
        self.assertEqual(TypeKind.RECORD, classify(Pair))
        self.assertEqual(TypeKind.RECORD, classify(Movie))
        self.assertEqual(TypeKind.SEQUENCE, classify(Countdown))
        self.assertEqual(TypeKind.MAP, classify(Settings))
        self.assertEqual(TypeKind.RECORD, classify(Box[int]))
        self.assertEqual(TypeKind.ANY, classify(Any))
        self.assertEqual(TypeKind.TYPEVAR, classify(T))

    def test_user_newtype_resolves_to_supertype(self):
        from typing import NewType
        UserId = NewType('UserId', int)
        self.assertEqual(TypeKind.LONG, classify(UserId))
        self.assertEqual('{"type":"long"}', get_schema(UserId))

    def test_not_a_type(self):
        with self.assertRaises(TypeError):
            classify(42)


class TestPyTypeInfo(unittest.TestCase):

    def test_equality(self):
        self.assertEqual(PyTypeInfo(Point), PyTypeInfo(Point))
        self.assertEqual(hash(PyTypeInfo(Point)), hash(PyTypeInfo(Point)))
        self.assertNotEqual(PyTypeInfo(Point), PyTypeInfo(Node))
        self.assertEqual(PyTypeInfo(Optional[int]), PyTypeInfo(Union[int, None]))

    def test_type_info_passes_descriptors_through(self):
        info = PyTypeInfo(Point)
        self.assertIs(info, type_info(info))

    def test_namespace_defaults_to_module(self):
        self.assertEqual(Pair.__module__, PyTypeInfo(Pair).namespace)
        self.assertEqual('', PyTypeInfo(int).namespace)
        self.assertEqual('com.example', PyTypeInfo(Node).namespace)

    def test_nullable_generic_args(self):
        self.assertEqual([PyTypeInfo(Point)], PyTypeInfo(Optional[Point]).generic_args())
        self.assertEqual([PyTypeInfo(str), PyTypeInfo(int)], PyTypeInfo(Dict[str, int]).generic_args())

    def test_dataclass_fields(self):
        self.assertEqual([FieldInfo('X', PyTypeInfo(Int32)), FieldInfo('Y', PyTypeInfo(Int32))],
                         PyTypeInfo(Point).fields())

    def test_self_referencing_fields(self):
        self.assertEqual(['value', 'next'], [f.name for f in PyTypeInfo(Node).fields()])
        self.assertEqual(PyTypeInfo(Node), PyTypeInfo(Node).fields()[1].type_info)

    def test_named_tuple_fields(self):
        self.assertEqual([FieldInfo('left', PyTypeInfo(str)), FieldInfo('right', PyTypeInfo(Int32))],
                         PyTypeInfo(Pair).fields())

    def test_typed_dict_fields(self):
        self.assertEqual(['title', 'year'], [f.name for f in PyTypeInfo(Movie).fields()])

    def test_class_fields_and_properties(self):
        # class variables, private names and unannotated properties are skipped
        self.assertEqual([FieldInfo('celsius', PyTypeInfo(float)), FieldInfo('fahrenheit', PyTypeInfo(float))],
                         PyTypeInfo(Temperature).fields())

    def test_type_arguments_are_substituted(self):
        self.assertEqual([FieldInfo('label', PyTypeInfo(str)), FieldInfo('value', PyTypeInfo(int)),
                          FieldInfo('spare', PyTypeInfo(Optional[int]))],
                         PyTypeInfo(Box[int]).fields())
        self.assertEqual(PyTypeInfo(T), PyTypeInfo(Box).fields()[1].type_info)

    def test_inherited_fields_come_first(self):
        self.assertEqual(['name', 'breed'], [f.name for f in PyTypeInfo(Dog).fields()])

    def test_enum_symbols_include_aliases(self):
        self.assertEqual(['Red', 'Green', 'Blue'], PyTypeInfo(Color).symbols())
        self.assertEqual(['Small', 'Medium', 'Large', 'Regular'], PyTypeInfo(Size).symbols())
        self.assertEqual([], PyTypeInfo(Point).symbols())


class TestCustomTypeInfo(unittest.TestCase):

    def test_record_from_custom_descriptor(self):
        person = RecordInfo('Person', 'org.people', [])
        person.fields().extend([
            FieldInfo('name', PyTypeInfo(str)),
            FieldInfo('manager', person),
        ])
        self.assertEqual(
            '{"type":"record","name":"Person","namespace":"org.people","fields":['
            '{"name":"name","type":{"type":"string"}},'
            '{"name":"manager","type":"org.people.Person"}]}',
            get_schema(person, embed_field_schemas=False))


if __name__ == '__main__':
    unittest.main()

"""
Unit tests for the value and envelope models.

Run with: python -m pytest tests/test_schemas.py -v
"""

import unittest
from datetime import datetime

from pydantic import TypeAdapter, ValidationError

from xmlrpcparser.decoder import parse_method_response
from xmlrpcparser.errors import RemoteFault
from xmlrpcparser.schemas import (
    Array,
    Boolean,
    DateTime,
    Double,
    Fault,
    Integer,
    MethodCall,
    MethodResponse,
    Nil,
    String,
    Struct,
    Success,
    XmlRpcValue,
)


class TestValues(unittest.TestCase):

    def test_to_python(self):
        value = Struct(value={
            "nil": Nil(),
            "flag": Boolean(value=True),
            "count": Integer(value=3),
            "ratio": Double(value=0.5),
            "name": String(value="x"),
            "when": DateTime(value=datetime(2020, 1, 1)),
            "items": Array(value=(Integer(value=1), Array(value=()))),
        })
        self.assertEqual(
            value.to_python(),
            {
                "nil": None,
                "flag": True,
                "count": 3,
                "ratio": 0.5,
                "name": "x",
                "when": datetime(2020, 1, 1),
                "items": [1, []],
            },
        )

    def test_values_are_immutable(self):
        value = Integer(value=1)
        with self.assertRaises(ValidationError):
            value.value = 2

    def test_struct_members_are_read_only(self):
        struct = Struct(value={"x": Integer(value=1)})
        with self.assertRaises(TypeError):
            struct.value["y"] = Integer(value=2)
        with self.assertRaises(TypeError):
            del struct.value["x"]
        self.assertEqual(dict(struct.value), {"x": Integer(value=1)})

    def test_decoded_fault_cannot_be_edited(self):
        response = parse_method_response(
            "<methodResponse><fault><value><struct>"
            "<member><name>faultCode</name><value><int>4</int></value></member>"
            "<member><name>faultString</name><value><string>bad</string></value></member>"
            "</struct></value></fault></methodResponse>"
        )
        with self.assertRaises(TypeError):
            response.value.value["faultCode"] = Integer(value=99)
        self.assertEqual(response.detail.code, 4)

    def test_double_must_be_finite(self):
        with self.assertRaises(ValidationError):
            Double(value=float("inf"))

    def test_integer_range(self):
        with self.assertRaises(ValidationError):
            Integer(value=2 ** 63)

    def test_boolean_is_not_an_integer(self):
        with self.assertRaises(ValidationError):
            Integer(value=True)

    def test_discriminated_union(self):
        adapter = TypeAdapter(XmlRpcValue)
        value = adapter.validate_python(
            {"kind": "array", "value": [{"kind": "integer", "value": 1}, {"kind": "nil"}]}
        )
        self.assertIsInstance(value, Array)
        self.assertIsInstance(value.value[1], Nil)
        self.assertEqual(value.to_python(), [1, None])


class TestEnvelopes(unittest.TestCase):

    def test_method_name_must_not_be_empty(self):
        with self.assertRaises(ValidationError):
            MethodCall(method_name="", params=())

    def test_response_kinds(self):
        adapter = TypeAdapter(MethodResponse)
        success = adapter.validate_python({"kind": "success", "value": {"kind": "string", "value": "ok"}})
        self.assertIsInstance(success, Success)
        fault = adapter.validate_python({"kind": "fault", "value": {"kind": "nil"}})
        self.assertIsInstance(fault, Fault)

    def test_fault_detail_requires_typed_members(self):
        fault = Fault(value=Struct(value={
            "faultCode": String(value="4"),
            "faultString": String(value="bad"),
        }))
        self.assertIsNone(fault.detail)

    def test_unwrap_fault_without_detail(self):
        fault = Fault(value=Nil())
        with self.assertRaises(RemoteFault) as ctx:
            fault.unwrap()
        self.assertIsNone(ctx.exception.code)
        self.assertEqual(ctx.exception.value, Nil())


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for the methodCall / methodResponse envelope parsers.

Run with: python -m pytest tests/test_envelope.py -v
"""

import unittest

from xmlrpcparser.config.settings import DecoderSettings
from xmlrpcparser.envelope import MethodCallParser, MethodResponseParser
from xmlrpcparser.errors import RemoteFault, StructuralError, TokenizerError
from xmlrpcparser.schemas import (
    Array,
    Fault,
    Integer,
    MethodCall,
    String,
    Struct,
    Success,
)

FAULT_RESPONSE = (
    "<methodResponse><fault><value><struct>"
    "<member><name>faultCode</name><value><int>4</int></value></member>"
    "<member><name>faultString</name><value><string>Too many params.</string></value></member>"
    "</struct></value></fault></methodResponse>"
)


def parse_call(xml, **settings):
    return MethodCallParser(DecoderSettings(**settings)).parse(xml)


def parse_response(xml, **settings):
    return MethodResponseParser(DecoderSettings(**settings)).parse(xml)


class TestMethodCall(unittest.TestCase):
    """Test <methodCall> decoding."""

    def test_single_param(self):
        call = parse_call(
            "<methodCall><methodName>examples.getStateName</methodName>"
            "<params><param><value><i4>41</i4></value></param></params></methodCall>"
        )
        self.assertEqual(
            call,
            MethodCall(method_name="examples.getStateName", params=(Integer(value=41),)),
        )

    def test_params_keep_order(self):
        call = parse_call(
            "<?xml version='1.0'?>\n"
            "<methodCall>\n"
            "  <methodName>sample.add</methodName>\n"
            "  <params>\n"
            "    <param><value><int>1</int></value></param>\n"
            "    <param><value><string>two</string></value></param>\n"
            "    <param><value><array><data/></array></value></param>\n"
            "  </params>\n"
            "</methodCall>\n"
        )
        self.assertEqual(call.method_name, "sample.add")
        self.assertEqual(call.params, (Integer(value=1), String(value="two"), Array(value=())))

    def test_without_params(self):
        call = parse_call("<methodCall><methodName>system.listMethods</methodName></methodCall>")
        self.assertEqual(call, MethodCall(method_name="system.listMethods", params=()))

    def test_empty_params(self):
        call = parse_call("<methodCall><methodName>ping</methodName><params/></methodCall>")
        self.assertEqual(call.params, ())

    def test_bytes_with_encoding_declaration(self):
        xml = (
            "<?xml version='1.0' encoding='iso-8859-1'?>"
            "<methodCall><methodName>greet</methodName>"
            "<params><param><value><string>caf\xe9</string></value></param></params></methodCall>"
        ).encode("iso-8859-1")
        self.assertEqual(parse_call(xml).params, (String(value="caf\xe9"),))

    def test_missing_method_name(self):
        with self.assertRaises(StructuralError):
            parse_call("<methodCall><params/></methodCall>")

    def test_empty_method_name(self):
        with self.assertRaises(StructuralError):
            parse_call("<methodCall><methodName>  </methodName></methodCall>")

    def test_duplicate_method_name(self):
        with self.assertRaises(StructuralError):
            parse_call("<methodCall><methodName>a</methodName><methodName>b</methodName></methodCall>")

    def test_param_without_value(self):
        with self.assertRaises(StructuralError):
            parse_call("<methodCall><methodName>a</methodName><params><param/></params></methodCall>")

    def test_param_with_two_values(self):
        with self.assertRaises(StructuralError):
            parse_call(
                "<methodCall><methodName>a</methodName><params><param>"
                "<value><int>1</int></value><value><int>2</int></value>"
                "</param></params></methodCall>"
            )

    def test_stray_text_between_params(self):
        with self.assertRaises(StructuralError):
            parse_call(
                "<methodCall><methodName>a</methodName><params>oops"
                "<param><value><int>1</int></value></param></params></methodCall>"
            )

    def test_wrong_root(self):
        with self.assertRaises(StructuralError):
            parse_call(FAULT_RESPONSE)

    def test_unknown_element(self):
        with self.assertRaises(StructuralError):
            parse_call("<methodCall><methodName>a</methodName><extra/></methodCall>")

    def test_malformed_xml(self):
        with self.assertRaises(TokenizerError) as ctx:
            parse_call("<methodCall><methodName>a</methodCall>")
        self.assertIn("line", ctx.exception.data)
        self.assertEqual(ctx.exception.to_dict()["faultCode"], -32700)

    def test_empty_document(self):
        with self.assertRaises(TokenizerError):
            parse_call("")

    def test_namespaced_elements(self):
        call = parse_call(
            "<methodCall xmlns='urn:example'><methodName>ns.echo</methodName>"
            "<params><param><value><int>1</int></value></param></params></methodCall>"
        )
        self.assertEqual(call, MethodCall(method_name="ns.echo", params=(Integer(value=1),)))

    def test_parser_is_single_use(self):
        parser = MethodCallParser()
        parser.parse("<methodCall><methodName>a</methodName></methodCall>")
        with self.assertRaises(RuntimeError):
            parser.parse("<methodCall><methodName>b</methodName></methodCall>")


class TestMethodResponse(unittest.TestCase):
    """Test <methodResponse> decoding."""

    def test_success(self):
        response = parse_response(
            "<methodResponse><params><param><value><string>South Dakota</string></value>"
            "</param></params></methodResponse>"
        )
        self.assertEqual(response, Success(value=String(value="South Dakota")))
        self.assertFalse(response.is_fault)
        self.assertEqual(response.unwrap(), String(value="South Dakota"))

    def test_fault(self):
        response = parse_response(FAULT_RESPONSE)
        self.assertEqual(
            response,
            Fault(value=Struct(value={
                "faultCode": Integer(value=4),
                "faultString": String(value="Too many params."),
            })),
        )
        self.assertTrue(response.is_fault)
        self.assertEqual(response.detail.code, 4)
        self.assertEqual(response.detail.message, "Too many params.")

    def test_fault_unwrap_raises(self):
        response = parse_response(FAULT_RESPONSE)
        with self.assertRaises(RemoteFault) as ctx:
            response.unwrap()
        self.assertEqual(ctx.exception.code, 4)
        self.assertEqual(ctx.exception.message, "Too many params.")
        self.assertEqual(ctx.exception.value, response.value)

    def test_fault_with_unexpected_shape_is_passed_through(self):
        xml = "<methodResponse><fault><value><string>boom</string></value></fault></methodResponse>"
        with self.assertLogs("xmlrpcparser.envelope", level="WARNING"):
            response = parse_response(xml)
        self.assertEqual(response, Fault(value=String(value="boom")))
        self.assertIsNone(response.detail)

    def test_fault_with_unexpected_shape_in_strict_mode(self):
        xml = "<methodResponse><fault><value><string>boom</string></value></fault></methodResponse>"
        with self.assertLogs("xmlrpcparser.envelope", level="WARNING"):
            with self.assertRaises(StructuralError):
                parse_response(xml, strict_fault_shape=True)

    def test_two_params(self):
        with self.assertRaises(StructuralError) as ctx:
            parse_response(
                "<methodResponse><params>"
                "<param><value><int>1</int></value></param>"
                "<param><value><int>2</int></value></param>"
                "</params></methodResponse>"
            )
        self.assertEqual(str(ctx.exception), "response must have exactly one param")

    def test_no_params(self):
        with self.assertRaises(StructuralError):
            parse_response("<methodResponse><params></params></methodResponse>")

    def test_params_and_fault(self):
        with self.assertRaises(StructuralError):
            parse_response(
                "<methodResponse><params><param><value><int>1</int></value></param></params>"
                + FAULT_RESPONSE[len("<methodResponse>"):]
            )

    def test_empty_response(self):
        with self.assertRaises(StructuralError):
            parse_response("<methodResponse/>")

    def test_fault_without_value(self):
        with self.assertRaises(StructuralError):
            parse_response("<methodResponse><fault></fault></methodResponse>")


if __name__ == "__main__":
    unittest.main()

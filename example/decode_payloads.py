# decode_payloads.py
from xmlrpcparser.decoder import XMLRPCDecoder
from xmlrpcparser.errors import RemoteFault, XMLRPCDecodeError

settings = {
    "log_level": "DEBUG",
    "implicit_strings": False,
}

decoder = XMLRPCDecoder(name="example", settings=settings)

CALL = """<?xml version="1.0"?>
<methodCall>
  <methodName>examples.getStateName</methodName>
  <params>
    <param><value><i4>41</i4></value></param>
  </params>
</methodCall>
"""

FAULT = """<?xml version="1.0"?>
<methodResponse>
  <fault>
    <value>
      <struct>
        <member><name>faultCode</name><value><int>4</int></value></member>
        <member><name>faultString</name><value><string>Too many parameters.</string></value></member>
      </struct>
    </value>
  </fault>
</methodResponse>
"""

BROKEN = "<methodResponse><params><param><value><int>abc</int></value></param></params></methodResponse>"


if __name__ == "__main__":
    call = decoder.parse_method_call(CALL)
    print(f"call: {call.method_name}{tuple(p.to_python() for p in call.params)}")

    try:
        decoder.parse_method_response(FAULT).unwrap()
    except RemoteFault as e:
        print(f"remote fault: {e}")

    try:
        decoder.parse_method_response(BROKEN)
    except XMLRPCDecodeError as e:
        print(f"decode error: {e.to_dict()}")

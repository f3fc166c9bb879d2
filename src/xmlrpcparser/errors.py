# xmlrpcparser/errors.py
from typing import Any, ClassVar
from dataclasses import dataclass

@dataclass(eq=False)
class XMLRPCDecodeError(Exception):
    message: str
    data: Any = None

    # Fault codes follow the XML-RPC fault code interoperability table
    code: ClassVar[int] = -32600

    def __str__(self) -> str:
        return self.message

    def to_dict(self):
        base = {"faultCode": self.code, "faultString": self.message}
        if self.data is not None:
            base["data"] = self.data
        return base


class TokenizerError(XMLRPCDecodeError):
    """Payload is not well-formed XML."""
    code: ClassVar[int] = -32700


class UnknownScalarType(XMLRPCDecodeError):
    """A <value> child is not one of the known scalar, array or struct tags."""
    code: ClassVar[int] = -32600


class StructuralError(XMLRPCDecodeError):
    """Missing, duplicated or misplaced element."""
    code: ClassVar[int] = -32600


class TypeCoercionError(XMLRPCDecodeError):
    """Element text cannot be converted to its declared type."""
    code: ClassVar[int] = -32602


class DateTimeFormatError(TypeCoercionError):
    pass


@dataclass(eq=False)
class RemoteFault(Exception):
    """Raised by ``Fault.unwrap()``; the remote side answered with a fault."""
    code: Any
    message: Any
    value: Any = None

    def __str__(self) -> str:
        return f"<Fault {self.code}: {self.message!r}>"

    def to_dict(self):
        return {"faultCode": self.code, "faultString": self.message}

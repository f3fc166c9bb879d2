# xmlrpcparser/schemas.py
from datetime import datetime
from types import MappingProxyType
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from xmlrpcparser.errors import RemoteFault

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_python(self) -> Any:
        """Return the plain Python equivalent of this value."""
        return self.value


# ──────────────────────────────────────────────────────────────
# Scalars
# ──────────────────────────────────────────────────────────────
class Nil(_Value):
    kind: Literal["nil"] = "nil"

    def to_python(self) -> None:
        return None


class Boolean(_Value):
    kind: Literal["boolean"] = "boolean"
    value: StrictBool


class Integer(_Value):
    """<int> and <i4>."""
    kind: Literal["integer"] = "integer"
    value: StrictInt = Field(..., ge=I64_MIN, le=I64_MAX)


class Double(_Value):
    kind: Literal["double"] = "double"
    value: StrictFloat = Field(..., allow_inf_nan=False)


class String(_Value):
    kind: Literal["string"] = "string"
    value: StrictStr = ""


class DateTime(_Value):
    kind: Literal["datetime"] = "datetime"
    value: datetime


# ──────────────────────────────────────────────────────────────
# Containers
# ──────────────────────────────────────────────────────────────
class Array(_Value):
    kind: Literal["array"] = "array"
    value: Tuple["XmlRpcValue", ...] = ()

    def to_python(self) -> list:
        return [item.to_python() for item in self.value]


class Struct(_Value):
    """Member names are unique; the last duplicate in the payload wins."""
    kind: Literal["struct"] = "struct"
    # stored as a read-only mapping
    value: Annotated[Dict[str, "XmlRpcValue"], AfterValidator(MappingProxyType)] = Field(
        default_factory=lambda: MappingProxyType({})
    )

    def to_python(self) -> dict:
        return {name: member.to_python() for name, member in self.value.items()}


XmlRpcValue = Annotated[
    Union[Nil, Boolean, Integer, Double, String, DateTime, Array, Struct],
    Field(discriminator="kind"),
]

Array.model_rebuild()
Struct.model_rebuild()


# ──────────────────────────────────────────────────────────────
# Envelopes
# ──────────────────────────────────────────────────────────────
class MethodCall(BaseModel):
    model_config = ConfigDict(frozen=True)

    method_name: str = Field(..., min_length=1)
    params: Tuple[XmlRpcValue, ...] = ()


class FaultDetail(BaseModel):
    """The conventional faultCode/faultString payload of a fault."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: StrictInt = Field(..., alias="faultCode")
    message: StrictStr = Field(..., alias="faultString")


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    value: XmlRpcValue

    @property
    def is_fault(self) -> bool:
        return False

    def unwrap(self) -> XmlRpcValue:
        return self.value


class Fault(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["fault"] = "fault"
    value: XmlRpcValue

    @property
    def is_fault(self) -> bool:
        return True

    @property
    def detail(self) -> Optional[FaultDetail]:
        """faultCode/faultString, or None when the value has another shape."""
        if not isinstance(self.value, Struct):
            return None
        members = self.value.value
        code, message = members.get("faultCode"), members.get("faultString")
        if not isinstance(code, Integer) or not isinstance(message, String):
            return None
        return FaultDetail(faultCode=code.value, faultString=message.value)

    def unwrap(self):
        detail = self.detail
        if detail is None:
            raise RemoteFault(code=None, message=None, value=self.value)
        raise RemoteFault(code=detail.code, message=detail.message, value=self.value)


MethodResponse = Annotated[Union[Success, Fault], Field(discriminator="kind")]

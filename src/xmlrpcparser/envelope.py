# xmlrpcparser/envelope.py
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Optional

from xmlrpcparser.config.settings import DecoderSettings
from xmlrpcparser.deserializer import ValueDeserializer
from xmlrpcparser.errors import StructuralError
from xmlrpcparser.schemas import Fault, MethodCall, MethodResponse, Success, XmlRpcValue
from xmlrpcparser.tokenizer import XMLTokenizer

logger = logging.getLogger("xmlrpcparser.envelope")


@dataclass
class _Element:
    tag: str
    text: List[str] = field(default_factory=list)
    values: List[XmlRpcValue] = field(default_factory=list)
    children: Counter = field(default_factory=Counter)

    @property
    def content(self) -> str:
        return "".join(self.text)


class _EnvelopeParser:
    """
    Recognizes the envelope around parameter values and hands every
    <value> to a ValueDeserializer.

    Subclasses describe their grammar as a table of parent tag to allowed
    child tags (``None`` is the document itself) and finish elements
    through the ``dispatch`` table. An instance decodes one document.
    """

    root: str = ""
    grammar: Dict[Optional[str], FrozenSet[str]] = {}
    dispatch: Dict[str, Callable[[Any, _Element, Optional[_Element]], None]] = {}

    def __init__(self, settings: DecoderSettings | None = None):
        self._settings = settings or DecoderSettings()
        self._tokenizer = XMLTokenizer()
        self._stack: List[_Element] = []
        self._consumed = False
        self._finished = False

    def parse(self, xml: str | bytes):
        if self._consumed:
            raise RuntimeError(f"{type(self).__name__} instances are single-use")
        self._consumed = True

        self._tokenizer.register(self)
        self._tokenizer.feed(xml)
        self._tokenizer.close()
        return self._result()

    def _result(self):
        raise NotImplementedError

    # ───── Event handlers ─────
    def start_element(self, name: str, attributes: Dict[str, str]) -> None:
        parent = self._stack[-1] if self._stack else None
        allowed = self.grammar.get(parent.tag if parent else None, frozenset())
        if name not in allowed:
            where = f"<{parent.tag}>" if parent else "document root"
            raise StructuralError(f"unexpected <{name}> at {where}", data={"tag": name})

        if parent is not None:
            parent.children[name] += 1
            self._check_child(parent, name)

        if name == "value":
            ValueDeserializer(self._tokenizer, parent.values.append, self._settings)
            return
        self._stack.append(_Element(name))

    def end_element(self, name: str) -> None:
        element = self._stack.pop()
        parent = self._stack[-1] if self._stack else None
        finish = self.dispatch.get(element.tag)
        if finish is None:
            _ensure_blank(element)
        else:
            finish(self, element, parent)
        if parent is None:
            self._finished = True

    def characters(self, text: str) -> None:
        if self._stack:
            self._stack[-1].text.append(text)

    def end_document(self) -> None:
        if not self._finished:
            raise StructuralError(f"document ended before </{self.root}>")

    # ───── Grammar hooks ─────
    def _check_child(self, parent: _Element, name: str) -> None:
        """Reject a child that breaks ordering or cardinality rules."""

    def _end_param(self, element: _Element, parent: _Element) -> None:
        _ensure_blank(element)
        if len(element.values) != 1:
            raise StructuralError("<param> must contain exactly one <value>")
        parent.values.append(element.values[0])


def _ensure_blank(element: _Element) -> None:
    if element.content.strip():
        raise StructuralError(
            f"unexpected text {element.content.strip()!r} inside <{element.tag}>",
            data={"tag": element.tag},
        )


# ──────────────────────────────────────────────────────────────
# <methodCall>
# ──────────────────────────────────────────────────────────────
class MethodCallParser(_EnvelopeParser):
    root = "methodCall"
    grammar = {
        None: frozenset({"methodCall"}),
        "methodCall": frozenset({"methodName", "params"}),
        "params": frozenset({"param"}),
        "param": frozenset({"value"}),
    }
    dispatch = {}

    def __init__(self, settings: DecoderSettings | None = None):
        super().__init__(settings)
        self._method_name: Optional[str] = None
        self._params: List[XmlRpcValue] = []

    def _result(self) -> MethodCall:
        return MethodCall(method_name=self._method_name, params=tuple(self._params))

    def _check_child(self, parent: _Element, name: str) -> None:
        if parent.tag == "methodCall":
            if parent.children[name] > 1:
                raise StructuralError(f"duplicate <{name}> in <methodCall>")
            if name == "params" and not parent.children["methodName"]:
                raise StructuralError("<methodName> must precede <params>")
        elif parent.tag == "param" and parent.children[name] > 1:
            raise StructuralError("<param> must contain exactly one <value>")

    def _end_method_name(self, element: _Element, parent: _Element) -> None:
        name = element.content.strip()
        if not name:
            raise StructuralError("<methodName> must not be empty")
        self._method_name = name

    dispatch["methodName"] = _end_method_name

    def _end_params(self, element: _Element, parent: _Element) -> None:
        _ensure_blank(element)
        self._params = list(element.values)

    dispatch["params"] = _end_params
    dispatch["param"] = _EnvelopeParser._end_param

    def _end_method_call(self, element: _Element, parent: None) -> None:
        _ensure_blank(element)
        if self._method_name is None:
            raise StructuralError("<methodCall> is missing <methodName>")
        logger.debug(f"decoded call {self._method_name} with {len(self._params)} params")

    dispatch["methodCall"] = _end_method_call


# ──────────────────────────────────────────────────────────────
# <methodResponse>
# ──────────────────────────────────────────────────────────────
class MethodResponseParser(_EnvelopeParser):
    root = "methodResponse"
    grammar = {
        None: frozenset({"methodResponse"}),
        "methodResponse": frozenset({"params", "fault"}),
        "params": frozenset({"param"}),
        "param": frozenset({"value"}),
        "fault": frozenset({"value"}),
    }
    dispatch = {}

    def __init__(self, settings: DecoderSettings | None = None):
        super().__init__(settings)
        self._response: Optional[MethodResponse] = None

    def _result(self) -> MethodResponse:
        return self._response

    def _check_child(self, parent: _Element, name: str) -> None:
        if parent.tag == "methodResponse" and sum(parent.children.values()) > 1:
            raise StructuralError("<methodResponse> must contain exactly one of <params> or <fault>")
        if parent.tag in ("param", "fault") and parent.children[name] > 1:
            raise StructuralError(f"<{parent.tag}> must contain exactly one <value>")

    def _end_params(self, element: _Element, parent: _Element) -> None:
        _ensure_blank(element)
        if len(element.values) != 1:
            raise StructuralError(
                "response must have exactly one param",
                data={"params": len(element.values)},
            )
        self._response = Success(value=element.values[0])

    dispatch["params"] = _end_params
    dispatch["param"] = _EnvelopeParser._end_param

    def _end_fault(self, element: _Element, parent: _Element) -> None:
        _ensure_blank(element)
        if len(element.values) != 1:
            raise StructuralError("<fault> must contain exactly one <value>")
        fault = Fault(value=element.values[0])
        if fault.detail is None:
            logger.warning(f"fault value is not a faultCode/faultString struct: {fault.value.kind}")
            if self._settings.strict_fault_shape:
                raise StructuralError(
                    "fault value must be a struct with faultCode and faultString",
                    data={"kind": fault.value.kind},
                )
        self._response = fault

    dispatch["fault"] = _end_fault

    def _end_method_response(self, element: _Element, parent: None) -> None:
        _ensure_blank(element)
        if self._response is None:
            raise StructuralError("<methodResponse> must contain exactly one of <params> or <fault>")

    dispatch["methodResponse"] = _end_method_response

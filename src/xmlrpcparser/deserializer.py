# xmlrpcparser/deserializer.py
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from xmlrpcparser.coercion import SCALAR_TAGS, coerce_scalar
from xmlrpcparser.config.settings import DecoderSettings
from xmlrpcparser.errors import StructuralError, UnknownScalarType
from xmlrpcparser.schemas import Array, String, Struct, XmlRpcValue
from xmlrpcparser.tokenizer import XMLTokenizer

logger = logging.getLogger("xmlrpcparser.deserializer")

CONTAINER_TAGS = frozenset({"array", "struct"})

# Allowed children for every element that may appear below <value>.
# Scalars and <name> hold text only.
_CHILDREN: Dict[str, frozenset] = {
    "value": SCALAR_TAGS | CONTAINER_TAGS,
    "array": frozenset({"data"}),
    "data": frozenset({"value"}),
    "struct": frozenset({"member"}),
    "member": frozenset({"name", "value"}),
}

# Elements whose children may appear at most once.
_SINGLE_CHILD = frozenset({"value", "array", "member"})


@dataclass
class _Frame:
    """One open element and what has been collected inside it so far."""
    tag: str
    text: List[str] = field(default_factory=list)
    items: List[Any] = field(default_factory=list)
    name: Optional[str] = None
    seen: Set[str] = field(default_factory=set)

    @property
    def content(self) -> str:
        return "".join(self.text)


def _ensure_blank(frame: _Frame) -> None:
    if frame.content.strip():
        raise StructuralError(
            f"unexpected text {frame.content.strip()!r} inside <{frame.tag}>",
            data={"tag": frame.tag},
        )


class ValueDeserializer:
    """
    Decodes one <value> element from a tokenizer event stream.

    Create it right after the tokenizer delivered the <value> start-tag.
    It takes over event dispatch, consumes everything up to the matching
    </value>, gives dispatch back to the previous handler and reports the
    finished value through ``on_complete``. Nested arrays and structs are
    tracked on an explicit frame stack, so depth is bounded by
    ``settings.max_depth`` rather than by the interpreter's recursion limit.
    """

    def __init__(
        self,
        tokenizer: XMLTokenizer,
        on_complete: Callable[[XmlRpcValue], None],
        settings: DecoderSettings | None = None,
    ):
        self._tokenizer = tokenizer
        self._on_complete = on_complete
        self._settings = settings or DecoderSettings()
        self._frames: List[_Frame] = [_Frame("value")]
        self._previous = tokenizer.register(self)

    @property
    def done(self) -> bool:
        return not self._frames

    # ───── Event handlers ─────
    def start_element(self, name: str, attributes: Dict[str, str]) -> None:
        parent = self._frames[-1]
        allowed = _CHILDREN.get(parent.tag, frozenset())

        if name not in allowed:
            if parent.tag == "value":
                raise UnknownScalarType(f"unknown value type <{name}>", data={"tag": name})
            raise StructuralError(f"unexpected <{name}> inside <{parent.tag}>", data={"tag": name})

        if parent.tag == "value" and parent.seen:
            raise StructuralError("<value> must contain exactly one typed element")
        if parent.tag in _SINGLE_CHILD and name in parent.seen:
            raise StructuralError(f"duplicate <{name}> inside <{parent.tag}>", data={"tag": name})

        if len(self._frames) >= self._settings.max_depth:
            raise StructuralError(
                f"value nesting exceeds {self._settings.max_depth} elements",
                data={"max_depth": self._settings.max_depth},
            )

        parent.seen.add(name)
        self._frames.append(_Frame(name))

    def end_element(self, name: str) -> None:
        frame = self._frames.pop()
        finish = self.dispatch.get(frame.tag, ValueDeserializer._end_scalar)
        value = finish(self, frame)

        if not self._frames:
            self._tokenizer.register(self._previous)
            self._on_complete(value)
            return

        parent = self._frames[-1]
        if frame.tag == "name":
            parent.name = value
        else:
            parent.items.append(value)

    def characters(self, text: str) -> None:
        self._frames[-1].text.append(text)

    def end_document(self) -> None:
        raise StructuralError(f"document ended inside <{self._frames[-1].tag}>")

    # ───── Element finishers ─────
    dispatch: Dict[str, Callable[["ValueDeserializer", _Frame], Any]] = {}

    def _end_scalar(self, frame: _Frame) -> XmlRpcValue:
        return coerce_scalar(frame.tag, frame.content)

    def _end_value(self, frame: _Frame) -> XmlRpcValue:
        if frame.items:
            _ensure_blank(frame)
            return frame.items[0]
        if self._settings.implicit_strings:
            return String(value=frame.content)
        raise StructuralError("<value> must contain exactly one typed element")

    dispatch["value"] = _end_value

    def _end_array(self, frame: _Frame) -> Array:
        _ensure_blank(frame)
        if not frame.items:
            raise StructuralError("<array> is missing <data>")
        return Array(value=frame.items[0])

    dispatch["array"] = _end_array

    def _end_data(self, frame: _Frame) -> tuple:
        _ensure_blank(frame)
        return tuple(frame.items)

    dispatch["data"] = _end_data

    def _end_struct(self, frame: _Frame) -> Struct:
        _ensure_blank(frame)
        members: Dict[str, XmlRpcValue] = {}
        for name, value in frame.items:
            if name in members:
                logger.debug(f"duplicate struct member {name!r}, keeping the last one")
            members[name] = value
        return Struct(value=members)

    dispatch["struct"] = _end_struct

    def _end_member(self, frame: _Frame) -> tuple:
        _ensure_blank(frame)
        if frame.name is None:
            raise StructuralError("<member> is missing <name>")
        if not frame.items:
            raise StructuralError(f"<member> {frame.name!r} is missing <value>", data={"name": frame.name})
        return frame.name, frame.items[0]

    dispatch["member"] = _end_member

    def _end_name(self, frame: _Frame) -> str:
        return frame.content

    dispatch["name"] = _end_name

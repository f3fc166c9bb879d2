# xmlrpcparser/tokenizer.py
from typing import Any, Dict, Protocol
from xml.parsers import expat

from xmlrpcparser.errors import TokenizerError


class EventHandler(Protocol):
    def start_element(self, name: str, attributes: Dict[str, str]) -> None: ...

    def end_element(self, name: str) -> None: ...

    def characters(self, text: str) -> None: ...

    def end_document(self) -> None: ...


def _local_name(name: str) -> str:
    # expat reports namespaced names as "uri localname"
    return name.rpartition(" ")[2]


class XMLTokenizer:
    """
    Push tokenizer over expat.

    Every event goes to whichever handler is registered at the moment it
    fires, so a handler may hand the stream over to another one (and get
    it back) in the middle of a document.
    """

    def __init__(self):
        self._parser = expat.ParserCreate(namespace_separator=" ")
        self._parser.buffer_text = True
        self._parser.StartElementHandler = self._on_start
        self._parser.EndElementHandler = self._on_end
        self._parser.CharacterDataHandler = self._on_characters
        self._handler: Any = None
        self._closed = False

    @property
    def handler(self) -> EventHandler:
        return self._handler

    def register(self, handler: EventHandler) -> EventHandler:
        """Route subsequent events to ``handler``; return the previous one."""
        previous, self._handler = self._handler, handler
        return previous

    # ───── expat callbacks ─────
    def _on_start(self, name, attributes):
        self._handler.start_element(_local_name(name), attributes)

    def _on_end(self, name):
        self._handler.end_element(_local_name(name))

    def _on_characters(self, text):
        self._handler.characters(text)

    # ───── Feeding ─────
    def feed(self, data: str | bytes) -> None:
        try:
            self._parser.Parse(data, False)
        except expat.ExpatError as e:
            raise self._error(e) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._parser.Parse(b"", True)
        except expat.ExpatError as e:
            raise self._error(e) from e
        self._handler.end_document()

    @staticmethod
    def _error(e: expat.ExpatError) -> TokenizerError:
        return TokenizerError(
            f"malformed XML: {expat.ErrorString(e.code)}",
            data={"line": e.lineno, "column": e.offset},
        )

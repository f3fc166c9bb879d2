# xmlrpcparser/decoder.py
import logging
from dataclasses import replace
from typing import Any

from xmlrpcparser.config.settings import DecoderSettings, configure_logging, normalize_settings
from xmlrpcparser.envelope import MethodCallParser, MethodResponseParser
from xmlrpcparser.errors import XMLRPCDecodeError
from xmlrpcparser.schemas import MethodCall, MethodResponse


# ──────────────────────────────────────────────────────────────
# Main Decoder Class
# ──────────────────────────────────────────────────────────────
class XMLRPCDecoder:
    """
    Entry point for decoding XML-RPC payloads.

    The decoder only holds immutable settings; every call builds a fresh
    single-use parser, so one decoder can be shared between threads.
    """

    def __init__(
        self,
        name: str | None = None,
        settings: DecoderSettings | dict | None = None,
        **kwargs: Any,
    ):
        # settings passed as keywords win over the settings argument
        base = normalize_settings(settings)
        if kwargs:
            base = replace(base, **kwargs)
        self._settings: DecoderSettings = base

        self._name = name or "XMLRPCDecoder"
        self._logger = logging.getLogger("xmlrpcparser.decoder")

        configure_logging(self._settings.log_level)
        self._logger.debug(f"Initialized {self._name}")

    # ───── Properties ─────
    @property
    def name(self) -> str:
        return self._name

    @property
    def settings(self) -> DecoderSettings:
        return self._settings

    # ───── Decoding ─────
    def parse_method_call(self, xml: str | bytes) -> MethodCall:
        """Decode a <methodCall> document."""
        try:
            return MethodCallParser(self._settings).parse(xml)
        except XMLRPCDecodeError as e:
            self._logger.debug(f"methodCall decode failed: {type(e).__name__}: {e}")
            raise

    def parse_method_response(self, xml: str | bytes) -> MethodResponse:
        """
        Decode a <methodResponse> document.

        A fault is returned as ``Fault``, not raised; call ``unwrap()`` on
        the result to get the value or a ``RemoteFault``.
        """
        try:
            return MethodResponseParser(self._settings).parse(xml)
        except XMLRPCDecodeError as e:
            self._logger.debug(f"methodResponse decode failed: {type(e).__name__}: {e}")
            raise


_default_decoder: XMLRPCDecoder | None = None


def _get_default_decoder() -> XMLRPCDecoder:
    global _default_decoder
    if _default_decoder is None:
        _default_decoder = XMLRPCDecoder(name="default")
    return _default_decoder


def parse_method_call(xml: str | bytes, settings: DecoderSettings | dict | None = None) -> MethodCall:
    if settings is None:
        return _get_default_decoder().parse_method_call(xml)
    return MethodCallParser(normalize_settings(settings)).parse(xml)


def parse_method_response(xml: str | bytes, settings: DecoderSettings | dict | None = None) -> MethodResponse:
    if settings is None:
        return _get_default_decoder().parse_method_response(xml)
    return MethodResponseParser(normalize_settings(settings)).parse(xml)

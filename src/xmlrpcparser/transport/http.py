# xmlrpcparser/transport/http.py
import logging

import httpx
from fastapi import HTTPException, Request

from xmlrpcparser.decoder import XMLRPCDecoder
from xmlrpcparser.errors import XMLRPCDecodeError
from xmlrpcparser.schemas import MethodCall, MethodResponse

XML_CONTENT_TYPES = ("text/xml", "application/xml")


class HTTPTransport:
    """
    Decodes payloads that already arrived over HTTP.

    ``read_call`` works as a FastAPI dependency for a server endpoint;
    ``decode_response`` takes a finished httpx response on the client side.
    """

    def __init__(self, decoder: XMLRPCDecoder | None = None):
        self.decoder = decoder or XMLRPCDecoder()
        self.logger = logging.getLogger("xmlrpcparser.transport")

    async def read_call(self, request: Request) -> MethodCall:
        raw = await request.body()
        if not raw:
            raise HTTPException(status_code=400, detail={"faultCode": -32600, "faultString": "empty body"})
        self._check_content_type(request.headers.get("content-type"))

        try:
            return self.decoder.parse_method_call(raw)
        except XMLRPCDecodeError as e:
            raise HTTPException(status_code=400, detail=e.to_dict()) from e

    def decode_response(self, response: httpx.Response) -> MethodResponse:
        response.raise_for_status()
        self._check_content_type(response.headers.get("content-type"))
        return self.decoder.parse_method_response(response.content)

    def _check_content_type(self, content_type: str | None) -> None:
        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type not in XML_CONTENT_TYPES:
            self.logger.warning(f"Unexpected content type for XML-RPC payload: {content_type!r}")

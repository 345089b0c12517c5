"""Async HTTP/1.1 server feeding requests into a handler pipeline."""

import asyncio
import logging
from http import HTTPStatus
from logging import Logger

from quotebot.http_constants import HTTPHeaders
from quotebot.http_request import HTTPRequest
from quotebot.http_response import HttpResponse
from quotebot.request_parser import (
    HEADER_BODY_SEPARATOR,
    HTTPParseError,
    InvalidContentLengthError,
    RequestParser,
)
from quotebot.route_handler import Handler


class HTTPServer:
    """
    Async HTTP/1.1 server using asyncio.

    Features:
    - Asyncio-based concurrent connection handling
    - Handlers run in worker threads, so a slow outbound call in one
      request never blocks the event loop
    - Configurable timeouts
    - Compression support (gzip)
    - Persistent connections (Connection: keep-alive/close)
    """

    CONNECTION_TIMEOUT = 5.0  # seconds
    MAX_HEAD_SIZE = 64 * 1024
    MAX_BODY_SIZE = 1024 * 1024

    def __init__(self, logger: Logger, host: str, port: int, handler: Handler):
        """
        Initialize HTTP server.

        Args:
            logger: Logger instance for debug/info/error messages
            host: Host address to bind to
            port: Port number to listen on (0 picks a free port)
            handler: Top-level handler, usually built by quotebot.bot.create_app
        """
        self.logger = logger
        self.host = host
        self.port = port
        self.handler = handler
        self._server: asyncio.Server | None = None

    async def start(self):
        """Start async server and accept connections."""
        server = await self.listen()
        async with server:
            await server.serve_forever()

    async def listen(self) -> asyncio.Server:
        """Bind the listening socket without blocking on it."""
        self._server = await asyncio.start_server(
            self._handle_connection, self.host, self.port, limit=HTTPServer.MAX_HEAD_SIZE
        )
        self.port = self._server.sockets[0].getsockname()[1]
        self.logger.info(f"Listening on {self.host}:{self.port}")
        return self._server

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ):
        """
        Handle single client connection asynchronously.

        Args:
            reader: Async stream reader for receiving data
            writer: Async stream writer for sending data
        """
        client_address = writer.get_extra_info("peername")
        self.logger.info(f"Connection from: {client_address}")

        try:
            while True:
                try:
                    raw_request = await self._receive_request(reader, client_address)
                except HTTPParseError as e:
                    # Body framing is unknown, so the connection cannot be reused.
                    self.logger.warning(f"Invalid request from {client_address}: {e}")
                    await self._send_response(writer, self._bad_request().to_bytes())
                    break
                if raw_request is None:
                    break

                try:
                    http_request = RequestParser.parse(raw_request)
                except HTTPParseError as e:
                    self.logger.warning(f"Invalid request from {client_address}: {e}")
                    await self._send_response(writer, self._bad_request().to_bytes())
                    continue

                response = await asyncio.to_thread(self.handler, http_request)

                should_close = self._should_close_connection(http_request, response)

                compression = http_request.headers.get(HTTPHeaders.ACCEPT_ENCODING)
                await self._send_response(
                    writer, response.to_bytes(compression=compression)
                )
                self.logger.info(f"Sent response to {client_address}")

                if should_close:
                    break

        except asyncio.TimeoutError:
            self.logger.debug(f"Connection timeout for {client_address}")
        except asyncio.IncompleteReadError:
            self.logger.debug(f"Client disconnected: {client_address}")
        except OSError as e:
            self.logger.warning(f"Socket error for {client_address}: {e}")
        except Exception as e:
            self.logger.error(
                f"Unexpected error for {client_address}: {e}", exc_info=True
            )
            try:
                error_response = HttpResponse(HTTPStatus.INTERNAL_SERVER_ERROR, {}, "")
                await self._send_response(writer, error_response.to_bytes())
            except Exception as e:
                logging.exception(f"Failed to send error response: {e}")
        finally:
            if not writer.is_closing():
                writer.close()

    async def _receive_request(
        self, reader: asyncio.StreamReader, client_address
    ) -> bytes | None:
        """
        Receive one request (head and Content-Length body) with timeout.

        Args:
            reader: Async stream reader
            client_address: Client address for logging

        Returns:
            Request bytes or None if connection closed/timeout

        Raises:
            HTTPParseError: If the head is undecodable or the body length is invalid
        """
        self.logger.debug(f"Waiting for data from {client_address}")

        try:
            head = await asyncio.wait_for(
                reader.readuntil(HEADER_BODY_SEPARATOR),
                timeout=HTTPServer.CONNECTION_TIMEOUT,
            )
        except asyncio.TimeoutError:
            self.logger.debug(f"Read timeout for {client_address}")
            return None
        except asyncio.IncompleteReadError as e:
            if e.partial:
                self.logger.debug(f"Incomplete request from {client_address}")
            else:
                self.logger.info(f"Connection closed by {client_address}")
            return None
        except asyncio.LimitOverrunError:
            raise InvalidContentLengthError("Request head too large")

        content_length = RequestParser.content_length(head)
        if content_length > HTTPServer.MAX_BODY_SIZE:
            raise InvalidContentLengthError(f"Body too large: {content_length} bytes")

        body = b""
        if content_length:
            body = await asyncio.wait_for(
                reader.readexactly(content_length),
                timeout=HTTPServer.CONNECTION_TIMEOUT,
            )

        self.logger.info(f"Received {len(head) + len(body)} bytes from {client_address}")
        return head + body

    @staticmethod
    def _bad_request() -> HttpResponse:
        return HttpResponse.text(HTTPStatus.BAD_REQUEST, HTTPStatus.BAD_REQUEST.phrase)

    @staticmethod
    async def _send_response(
        writer: asyncio.StreamWriter, response_bytes: bytes
    ) -> None:
        """
        Send response bytes to async stream.

        Args:
            writer: Async stream writer
            response_bytes: Response data to send
        """
        writer.write(response_bytes)
        await writer.drain()

    @staticmethod
    def _should_close_connection(request: HTTPRequest, response: HttpResponse) -> bool:
        """
        Determine if connection should be closed.

        HTTP/1.1 defaults to keep-alive unless Connection: close.

        Args:
            request: HTTP request to check for Connection header
            response: HTTP response to update with Connection header

        Returns:
            True if connection should close, False to keep alive
        """
        connection_header = request.headers.get(HTTPHeaders.CONNECTION, "").lower()

        if connection_header == "close":
            response.headers["Connection"] = "close"
            return True

        return False

"""KidLearn JSON-lines server entry point.

Usage: python -m kidlearn.server

Reads JSON requests from stdin (one per line), writes JSON responses to stdout.
All logging goes to stderr to keep the protocol clean.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import structlog

from kidlearn.config.settings import Settings
from kidlearn.logging_config import configure_logging

from .handler import ServerHandler
from .protocol import Notification, ProtocolError, Request, Response

logger = structlog.get_logger()


async def handle_line(handler: ServerHandler, line: str) -> Optional[Response]:
    """Turn one input line into a response; blank lines produce none."""
    line = line.strip()
    if not line:
        return None

    try:
        request = Request.from_json_line(line)
    except ProtocolError as e:
        return Response.failure(str(e))

    try:
        result = await handler.dispatch({"method": request.method, "params": request.params})
        return Response(id=request.id, result=result)
    except Exception as e:
        logger.error("request_failed", method=request.method, error=str(e))
        return Response.failure(str(e), request_id=request.id)


async def main(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings.load()
    configure_logging(settings.log_level, debug=settings.debug, stream=sys.stderr)
    loop = asyncio.get_event_loop()

    def write_line(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def write_notification(notification: Notification) -> None:
        write_line(notification.to_json_line())

    handler = ServerHandler(settings=settings, write_notification=write_notification)
    logger.info("server_ready", storage=settings.storage.backend.value)

    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)

    while True:
        raw = await reader.readline()
        if not raw:
            break  # stdin closed

        response = await handle_line(handler, raw.decode("utf-8", errors="replace"))
        if response is not None:
            write_line(response.to_json_line())


if __name__ == "__main__":
    asyncio.run(main())

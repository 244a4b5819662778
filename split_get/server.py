# split_get/server.py
"""
Local file server with byte-range support, for trying the downloader out
against real HTTP without leaving the machine.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from aiohttp import web

logger = logging.getLogger(__name__)


class RangeFileServer:
    """Serves files under a directory over HTTP GET/HEAD.

    With ignore_range=True every request gets the whole file with status 200,
    the way servers without range support behave.
    """

    def __init__(self, root, host: str = "127.0.0.1", port: int = 8080, ignore_range: bool = False):
        self.root = Path(root).resolve()
        self.host = host
        self.port = port
        self.ignore_range = ignore_range
        self.web_runner: Optional[web.AppRunner] = None

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get('/{path:.*}', self.handle_file)
        return app

    async def handle_file(self, request: web.Request) -> web.StreamResponse:
        """Web handler returning the requested file, honouring Range unless told not to."""
        path = (self.root / request.match_info['path']).resolve()
        try:
            path.relative_to(self.root)
        except ValueError:
            raise web.HTTPForbidden()
        if not path.is_file():
            raise web.HTTPNotFound()

        logger.debug("%s %s range=%s", request.method, request.path, request.headers.get('Range', '-'))
        if self.ignore_range:
            data = await asyncio.get_running_loop().run_in_executor(None, path.read_bytes)
            return web.Response(body=data, content_type='application/octet-stream')
        return web.FileResponse(path)

    async def start(self):
        """Initializes and starts the web server."""
        self.web_runner = web.AppRunner(self.create_app())
        await self.web_runner.setup()
        site = web.TCPSite(self.web_runner, self.host, self.port)
        await site.start()
        # Port 0 means the OS picked one
        self.port = self.web_runner.addresses[0][1]
        logger.info("Serving %s on %s:%d", self.root, self.host, self.port)

    async def stop(self):
        """Stops the web server gracefully."""
        if self.web_runner:
            await self.web_runner.cleanup()
            self.web_runner = None
            logger.info("Server on %s:%d stopped.", self.host, self.port)

    async def __aenter__(self) -> "RangeFileServer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    async def serve_forever(self):
        async with self:
            await asyncio.Event().wait()

# Copyright (c) 2024 nggit

import asyncio
import concurrent.futures

from http import HTTPStatus
from traceback import TracebackException

from tremolo.utils import html_escape


class HeadersSentError(RuntimeError):
    pass


class HTTPResponse:
    """Wraps a tremolo response with an explicit ``write_head`` commit.

    Status and headers stay mutable until ``write_head`` is called, either
    directly or implicitly by the first ``write``.
    """

    def __init__(self, response):
        self.response = response
        self.loop = response.request.protocol.loop
        self.logger = response.request.protocol.logger
        self.tasks = set()
        self.status_code = 200
        self.status_message = None
        self._headers = {}
        self._committed = False

    def __getattr__(self, name):
        return getattr(self.response, name)

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.status_code}>'

    @property
    def protocol(self):  # don't cache request.protocol
        return self.response.request.protocol

    def create_task(self, coro):
        task = self.loop.create_task(coro)

        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)

    async def join(self):
        while self.tasks:
            await self.tasks.pop()

    async def handle_exception(self, exc):
        if self.protocol is None or self.protocol.transport is None:
            return

        if self.protocol.transport.is_closing():  # maybe stuck?
            self.protocol.transport.abort()
            return

        self.response.request.http_keepalive = False

        if isinstance(exc, Exception):
            if not self.headers_sent():
                self.status_code = 500
                self.status_message = None
                self.set_header('Content-Type', 'text/html; charset=utf-8')

            if self.protocol.options['debug']:
                te = TracebackException.from_exception(exc)
                await self.write(
                    b'<ul><li>%s</li></ul>\n' % b'</li><li>'.join(
                        html_escape(line).encode() for line in te.format()
                    )
                )
            else:
                await self.write(
                    f'<ul><li>{exc.__class__.__name__}: '
                    f'{html_escape(str(exc))}</li></ul>\n'
                    .encode()
                )
        else:
            self.protocol.print_exception(exc)

    def run_coroutine(self, coro):
        fut = concurrent.futures.Future()

        async def callback():
            try:
                result = await coro

                if not fut.done():
                    fut.set_result(result)
            except BaseException as exc:
                if not fut.done():
                    fut.set_result(None)

                await self.handle_exception(exc)

        self.loop.call_soon_threadsafe(self.create_task, callback())
        return fut

    def call_soon(self, func, *args):
        try:
            loop = asyncio.get_running_loop()

            if loop is self.loop:
                return func(*args)
        except RuntimeError:
            pass

        fut = concurrent.futures.Future()

        def callback():
            try:
                result = func(*args)

                if not fut.done():
                    fut.set_result(result)
            except BaseException as exc:
                if not fut.done():
                    fut.set_exception(exc)

        self.loop.call_soon_threadsafe(callback)
        return fut.result()

    def headers_sent(self):
        return self._committed or self.call_soon(self.response.headers_sent)

    def get_header(self, name):
        header = self._headers.get(name.lower())

        if header:
            return header[1]

    def has_header(self, name):
        return name.lower() in self._headers

    def get_header_names(self):
        return [name for name, _ in self._headers.values()]

    def set_header(self, name, value=''):
        if self._committed:
            raise HeadersSentError(
                f'cannot set header {name!r} after headers are sent'
            )

        self._headers[name.lower()] = (name, value)

        if not isinstance(value, (str, bytes)):
            value = str(value)

        self.call_soon(self.response.set_header, name, value)

    def remove_header(self, name):
        if self._committed:
            raise HeadersSentError(
                f'cannot remove header {name!r} after headers are sent'
            )

        if self._headers.pop(name.lower(), None):
            self.call_soon(
                self.response.headers.pop,
                name.lower().encode('latin-1'), None
            )

    def write_head(self, status=None, reason=None):
        if self._committed:
            raise HeadersSentError('headers are already sent')

        if status is not None:
            self.status_code = status

            if reason is not None:
                self.status_message = reason

        message = self.status_message

        if message is None:
            try:
                message = HTTPStatus(self.status_code).phrase
            except ValueError:
                message = ''

        self.call_soon(self.response.set_status, self.status_code, message)
        self._committed = True
        self.logger.info(
            'headers committed: %d %s (%d headers)',
            self.status_code, message, len(self._headers)
        )
        return self

    async def write(self, data, **kwargs):
        if not self._committed:
            # may be a CommitInterceptor installed by on_headers()
            self.write_head()

        await self.response.write(data, **kwargs)

    def print(self, *args, sep=' ', end='\n', **kwargs):
        coro = self.write((sep.join(map(str, args)) + end).encode())

        try:
            loop = asyncio.get_running_loop()

            if loop is self.loop:
                self.create_task(coro)
                return
        except RuntimeError:
            pass

        self.loop.call_soon_threadsafe(self.create_task, coro)

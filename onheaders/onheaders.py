# Copyright (c) 2024 nggit

import time

from .commit import on_headers
from .response import HTTPResponse


def response_time(name, started):
    def listener(response):
        elapsed = (time.perf_counter() - started) * 1000

        response.set_header(name, f'{elapsed:.3f}ms')

    return listener


def powered_by(value):
    def listener(response):
        if not response.has_header('X-Powered-By'):
            response.set_header('X-Powered-By', value)

    return listener


class OnHeaders:
    def __init__(self, app):
        app.add_hook(self._on_worker_start, 'worker_start')
        app.add_middleware(self._on_request, 'request', priority=0)  # high
        app.add_middleware(self._on_response, 'response')
        app.add_middleware(self._on_close, 'close')

    async def _on_worker_start(self, **worker):
        logger = worker['logger']
        g = worker['globals']
        g.options['response_time_header'] = g.options.get(
            'response_time_header', None
        )
        g.options['powered_by'] = g.options.get('powered_by', None)

        if g.options['response_time_header']:
            logger.info(
                'onheaders: response time in %s',
                g.options['response_time_header']
            )

    async def _on_request(self, **server):
        response = server['response']
        ctx = server['context']
        g = server['globals']

        ctx.response = HTTPResponse(response)

        # registered first, fires last and sees the final headers
        if g.options.get('response_time_header'):
            on_headers(
                ctx.response,
                response_time(
                    g.options['response_time_header'], time.perf_counter()
                )
            )

        if g.options.get('powered_by'):
            on_headers(ctx.response, powered_by(g.options['powered_by']))

    async def _on_response(self, **server):
        logger = server['logger']
        ctx = server['context']

        if not ctx.get('response') or ctx.response.headers_sent():
            return

        logger.info('onheaders: committing %r', ctx.response)
        ctx.response.write_head()

    async def _on_close(self, **server):
        ctx = server['context']

        if ctx.get('response'):
            ctx.response = None

#!/usr/bin/env python3

import hashlib
import os
import sys

# makes imports relative from the repo directory
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tremolo import Application  # noqa: E402

from onheaders import OnHeaders, on_headers  # noqa: E402

app = Application()

OnHeaders(app)


def etag(body):
    def listener(response):
        if response.status_code == 200 and not response.has_header('ETag'):
            response.set_header(
                'ETag', '"%s"' % hashlib.sha1(body).hexdigest()  # nosec B324
            )

    return listener


def no_cache(response):
    response.set_header('Cache-Control', 'no-cache')


@app.route('/')
async def index(**server):
    response = server['context'].response
    body = b'Hello, World!\n'

    on_headers(response, etag(body))
    on_headers(response, no_cache)

    response.set_header('Content-Type', 'text/plain')
    await response.write(body)


@app.route('/created')
async def created(**server):
    response = server['context'].response

    on_headers(
        response,
        lambda response: response.set_header('X-Status', response.status_code)
    )
    response.write_head(201, 'Created', {'Location': '/'})
    await response.write(b'Created\n')


if __name__ == '__main__':
    app.run(
        '127.0.0.1', 8000, debug=True,
        response_time_header='X-Response-Time', powered_by='onheaders'
    )

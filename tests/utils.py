__all__ = (
    'Response', 'TremoloResponse', 'App', 'Context',
    'append_header', 'echo_listener'
)

import logging  # noqa: E402


class Response:
    """Minimal object with the capabilities write_head interception needs."""

    def __init__(self, result=True, error=None):
        self.status_code = 200
        self.status_message = None
        self.headers = {}
        self.calls = []
        self.result = result
        self.error = error

    def set_header(self, name, value):
        self.headers[name.lower()] = value

    def get_header(self, name):
        return self.headers.get(name.lower())

    def write_head(self, *args):
        self.calls.append(
            (args, dict(self.headers), self.status_code, self.status_message)
        )

        if self.error is not None:
            raise self.error

        return self.result


class Transport:
    def __init__(self):
        self.closing = False
        self.aborted = False

    def is_closing(self):
        return self.closing

    def abort(self):
        self.aborted = True


class Protocol:
    def __init__(self, loop, debug=False):
        self.loop = loop
        self.logger = logging.getLogger('tests')
        self.options = {'debug': debug}
        self.transport = Transport()
        self.exceptions = []

    def print_exception(self, exc):
        self.exceptions.append(exc)


class Request:
    def __init__(self, protocol):
        self.protocol = protocol
        self.http_keepalive = True


class TremoloResponse:
    """Records what a tremolo response would put on the wire."""

    def __init__(self, loop, debug=False):
        self.request = Request(Protocol(loop, debug))
        self.headers = {}
        self.status = (200, b'OK')
        self.body = b''
        self._headers_sent = False

    def headers_sent(self, sent=False):
        if sent:
            self._headers_sent = True

        return self._headers_sent

    def set_header(self, name, value=''):
        if isinstance(name, str):
            name = name.encode('latin-1')

        if isinstance(value, str):
            value = value.encode('latin-1')

        # tremolo keys by a case-insensitive name and stores the values
        self.headers[name.lower()] = [value]

    def set_status(self, status=200, message='OK'):
        if isinstance(message, str):
            message = message.encode('latin-1')

        self.status = (status, message)

    async def write(self, data, **kwargs):
        self.headers_sent(True)
        self.body += data


class App:
    def __init__(self):
        self.hooks = {}
        self.middlewares = {}

    def add_hook(self, func, name='worker_start'):
        self.hooks[name] = func

    def add_middleware(self, func, name='request', priority=999):
        self.middlewares[name] = func


def append_header(num):
    def listener(response):
        response.set_header(
            'X-Outgoing', '%s,%d' % (response.get_header('X-Outgoing'), num)
        )

    return listener


def echo_listener(response):
    response.set_header('X-Outgoing-Echo', response.get_header('X-Outgoing'))


class Context(dict):
    """Same access pattern as the tremolo request/worker context."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name, value):
        self[name] = value

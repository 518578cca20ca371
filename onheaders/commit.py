# Copyright (c) 2024 nggit

import logging
import numbers
import weakref

from collections.abc import Mapping

logger = logging.getLogger(__name__)


class CommitArgs:
    """A normalized call to ``write_head``.

    ``status`` and ``reason`` are ``None`` when the call did not carry them.
    ``headers`` is the raw header payload, applied through ``set_header``
    and never forwarded.
    """
    __slots__ = ('status', 'reason', 'headers')

    def __init__(self, status=None, reason=None, headers=None):
        self.status = status
        self.reason = reason
        self.headers = headers

    def __repr__(self):
        return (
            f'{self.__class__.__name__}(status={self.status!r}, '
            f'reason={self.reason!r}, headers={self.headers!r})'
        )

    def __eq__(self, other):
        if not isinstance(other, CommitArgs):
            return NotImplemented

        return (self.status == other.status and
                self.reason == other.reason and
                self.headers == other.headers)

    def forward_args(self):
        if self.status is None:
            return ()

        if self.reason is None:
            return (self.status,)

        return (self.status, self.reason)


def parse_commit_args(*args):
    args = list(args)
    status = reason = headers = None

    # bool is an int subclass but never a status code
    if (args and isinstance(args[0], numbers.Real) and
            not isinstance(args[0], bool)):
        status = args.pop(0)

        if not (isinstance(status, numbers.Integral) or
                float(status).is_integer()):
            raise TypeError(f'invalid status code: {status!r}')

        status = int(status)

        if args and isinstance(args[0], str):
            reason = args.pop(0)

    if len(args) > 1:
        raise TypeError(
            f'write_head() got {len(args)} unexpected trailing arguments'
        )

    if args:
        headers = args[0]

    return CommitArgs(status, reason, headers)


def set_headers(response, headers):
    if not headers:
        return

    if isinstance(headers, Mapping):
        for name, value in headers.items():
            if name:
                response.set_header(name, value)

        return

    headers = list(headers)

    if isinstance(headers[0], (str, bytes)):
        # raw form: name, value, name, value, ...
        if len(headers) % 2:
            raise TypeError(
                f'raw headers must have an even length, got {headers!r}'
            )

        headers = zip(headers[::2], headers[1::2])

    for name, value in headers:
        if name:
            response.set_header(name, value)


class CommitInterceptor:
    def __init__(self, response, commit):
        self._response = weakref.ref(response)
        self._commit = commit
        self._listeners = []
        self._fired = False

    @property
    def response(self):
        return self._response()

    @property
    def fired(self):
        return self._fired

    @property
    def listeners(self):
        return tuple(self._listeners)

    def add(self, listener):
        self._listeners.append(listener)

    def __call__(self, *args):
        response = self._response()

        if response is None:
            raise ReferenceError('response is no longer available')

        commit_args = parse_commit_args(*args)

        if commit_args.status is not None:
            response.status_code = commit_args.status

            if commit_args.reason is not None:
                response.status_message = commit_args.reason

        set_headers(response, commit_args.headers)
        forward_args = commit_args.forward_args()

        if not self._fired:
            self._fired = True
            logger.debug(
                'firing %d listener(s) for %r', len(self._listeners), response
            )

            # last registered, first fired
            for listener in reversed(self._listeners):
                listener(response)

            # same argument count, current values
            forward_args = (
                response.status_code, response.status_message
            )[:len(forward_args)]

        return self._commit(*forward_args)


def on_headers(response, listener):
    if response is None:
        raise TypeError('argument response is required')

    if not callable(listener):
        raise TypeError('argument listener must be a function')

    interceptor = getattr(response, 'write_head', None)

    if not (isinstance(interceptor, CommitInterceptor) and
            interceptor.response is response):
        interceptor = CommitInterceptor(response, response.write_head)
        response.write_head = interceptor
        logger.debug('commit interceptor installed on %r', response)

    interceptor.add(listener)

# Copyright (c) 2024 nggit

__version__ = '0.1.0'
__all__ = (
    'CommitArgs', 'CommitInterceptor', 'parse_commit_args', 'set_headers',
    'on_headers', 'HeadersSentError', 'HTTPResponse', 'OnHeaders'
)

from .commit import (  # noqa: E402
    CommitArgs, CommitInterceptor, parse_commit_args, set_headers, on_headers
)
from .response import HeadersSentError, HTTPResponse  # noqa: E402
from .onheaders import OnHeaders  # noqa: E402

"""
=============================================================================
REQUEST HANDLER INTERFACE
=============================================================================

A request handler turns an HTTPRequest into an HTTPResponse. That is the
entire contract:

    class RequestHandler:
        def handle(self, request: HTTPRequest) -> HTTPResponse

Handlers are also callable, so anything that expects a plain
``fn(request) -> response`` (such as a middleware's ``next``) accepts one.

=============================================================================
DELEGATED HANDLERS
=============================================================================

Most handlers are just functions. DelegatedRequestHandler wraps a function
so it can be passed wherever a RequestHandler object is expected:

        def get_user(request):
            return ok({"id": 1})

        handler = DelegatedRequestHandler(get_user)
        handler.handle(request)        # → get_user(request)

    Or with the decorator:

        @request_handler
        def get_user(request):
            return ok({"id": 1})

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Union
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# Plain function form of a handler.
HandlerFunc = Callable[[HTTPRequest], HTTPResponse]


class RequestHandler(ABC):
    """Abstract base class for request handlers."""

    @abstractmethod
    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Produce a response for the request.

        Args:
            request: The incoming HTTP request

        Returns:
            The HTTP response
        """

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle(request)

    @property
    def name(self) -> str:
        """Handler name for logging."""
        return self.__class__.__name__


class DelegatedRequestHandler(RequestHandler):
    """
    A RequestHandler that delegates to a function.

    The delegate has the form ``fn(request) -> response``.
    """

    def __init__(self, func: HandlerFunc, name: Optional[str] = None):
        """
        Args:
            func: Function converting a request into a response
            name: Optional name for logging (defaults to the function name)
        """
        self._func = func
        self._name = name or getattr(func, "__name__", type(func).__name__)
        logger.debug(f"Created delegated handler: {self._name}")

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Delegate to the wrapped function."""
        return self._func(request)

    @property
    def name(self) -> str:
        return self._name


def request_handler(func: HandlerFunc) -> DelegatedRequestHandler:
    """Decorator to create a request handler from a function."""
    return DelegatedRequestHandler(func)


def as_handler(handler: Union[RequestHandler, HandlerFunc]) -> RequestHandler:
    """
    Coerce a handler object or a plain function into a RequestHandler.

    Raises:
        TypeError: if handler is neither
    """
    if isinstance(handler, RequestHandler):
        return handler

    if callable(handler):
        return DelegatedRequestHandler(handler)

    raise TypeError(f"Expected a RequestHandler or callable, got {type(handler).__name__}")

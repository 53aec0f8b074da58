"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Middleware sits in front of a request handler. It receives the request
AND the handler that would otherwise answer it, and decides what to do:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 process(request, handler)                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request ──► [before] ──► handler.handle(request) ──► [after] ──►  │
    │                  │                                         Response  │
    │                  │                                                   │
    │                  └──► short-circuit: return a response without       │
    │                       calling the handler at all                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Middleware instances are also callable as ``middleware(request, next)``
where ``next`` may be a plain function; it is adapted into a
RequestHandler before process() sees it.

=============================================================================
DELEGATED MIDDLEWARE
=============================================================================

Most middleware is a one-off function. DelegatedMiddleware wraps one so
it can be passed wherever a Middleware object is expected:

        @delegated_middleware
        def add_header(request, handler):
            response = handler.handle(request)
            response.set_header("X-Custom", "value")
            return response

        add_header.process(request, handler)

=============================================================================
INTERVIEW INSIGHT: WHY WRAP A FUNCTION IN AN OBJECT?
=============================================================================

Q: "Python has first-class functions. Why not pass the function around?"
A: "Code that accepts middleware is typed against the Middleware
   contract: it calls process() and reads .name for logging. A wrapper
   lets a plain function satisfy that contract without every caller
   special-casing functions. It is the Adapter pattern."

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Union
import logging

from ..handlers.base import HandlerFunc, RequestHandler, as_handler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# NextHandler is what a middleware is given to continue with: a handler
# object or a plain function.
NextHandler = Union[RequestHandler, HandlerFunc]

# Plain function form of a middleware.
MiddlewareFunc = Callable[[HTTPRequest, RequestHandler], HTTPResponse]


class Middleware(ABC):
    """
    Abstract base class for middleware.

    Subclasses implement process(). It MUST either call
    ``handler.handle(request)`` or return its own response.
    """

    @abstractmethod
    def process(self, request: HTTPRequest, handler: RequestHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming HTTP request
            handler: The handler to delegate to (call handler.handle!)

        Returns:
            HTTP response (either from the handler or short-circuited)
        """

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return self.process(request, as_handler(next))

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class DelegatedMiddleware(Middleware):
    """
    Middleware that delegates request processing to a function.

    The delegate has the form ``fn(request, handler) -> response``.
    """

    def __init__(self, func: MiddlewareFunc, name: Optional[str] = None):
        """
        Create middleware from a function.

        Args:
            func: Function with signature (request, handler) → response
            name: Optional name for logging (defaults to function name)
        """
        self._func = func
        self._name = name or getattr(func, "__name__", type(func).__name__)
        logger.debug(f"Created delegated middleware: {self._name}")

    def process(self, request: HTTPRequest, handler: RequestHandler) -> HTTPResponse:
        """Delegate to the wrapped function."""
        return self._func(request, handler)

    @property
    def name(self) -> str:
        """Return the middleware name."""
        return self._name


def delegated_middleware(func: MiddlewareFunc) -> DelegatedMiddleware:
    """
    Decorator to create middleware from a function.

    Usage:
        @delegated_middleware
        def require_json(request, handler):
            if request.content_type != "application/json":
                return HTTPResponse(status=HTTPStatus.BAD_REQUEST)
            return handler.handle(request)
    """
    return DelegatedMiddleware(func)

"""Uniform sync/async dispatch of typed requests to the transport.

Both entry points drive the same core routine. The core is a generator that
validates the request, yields exactly one transport invocation and turns
whatever comes back (a response, a raw body, or a transport fault) into a
typed response. The sync driver feeds it the blocking result; the async
driver awaits the invocation first.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generator, Optional, TypeVar

from opensearchpy.exceptions import ConnectionError as OSConnectionError
from opensearchpy.exceptions import SerializationError, TransportError

from .exceptions import InvalidRequestError
from .request import Request, RequestParameters
from .response import Response

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Request)
TResponse = TypeVar("TResponse", bound=Response)

Invoke = Callable[[RequestParameters, R], TResponse]
InvokeAsync = Callable[[RequestParameters, R], Awaitable[TResponse]]

_TRANSPORT_FAULTS = (TransportError, SerializationError)


def invoke_or_default(
    selector: Optional[Callable[[R], Optional[R]]],
    factory: Callable[[], R],
) -> R:
    """Apply *selector* to a fresh default request built by *factory*.

    Without a selector the default request is used as is. A selector that
    returns ``None`` or anything that is not a request is a caller error.
    """
    request = factory()
    if selector is None:
        return request
    selected = selector(request)
    if not isinstance(selected, Request):
        raise InvalidRequestError(
            f"Selector for {type(request).__name__} returned {type(selected).__name__} "
            "instead of a request"
        )
    return selected


def _cancelled_by_transport(exc: TransportError) -> bool:
    # opensearch-py wraps the underlying exception as ``info`` on ConnectionError
    return isinstance(exc, OSConnectionError) and isinstance(exc.info, asyncio.CancelledError)


def _advance(core: Generator, value: Any = None, error: Optional[BaseException] = None):
    """Step *core* once; return ``(done, value)``."""
    try:
        if error is not None:
            return False, core.throw(error)
        return False, core.send(value)
    except StopIteration as stop:
        return True, stop.value


class Dispatcher:
    """Execute requests against a transport, blocking or awaitable."""

    def _core(
        self,
        request: Optional[Request],
        response_cls: type[TResponse],
        invoke: Callable[[RequestParameters, Any], Any],
    ) -> Generator[Any, Any, TResponse]:
        if not isinstance(request, Request):
            raise InvalidRequestError(
                f"Expected a request for {response_cls.__name__}, got {type(request).__name__}"
            )
        request.validate()

        logger.debug("Dispatching %r -> %s", request, response_cls.__name__)
        try:
            result = yield invoke(request.parameters, request)
        except _TRANSPORT_FAULTS as exc:
            if isinstance(exc, TransportError) and _cancelled_by_transport(exc):
                raise asyncio.CancelledError() from exc
            logger.debug(
                "%s failed: %s (%s)",
                type(request).__name__,
                type(exc).__name__,
                getattr(exc, "status_code", "N/A"),
            )
            return response_cls.from_transport_error(exc)

        if isinstance(result, Response):
            return result
        return response_cls.from_body(result)

    def dispatch(
        self,
        request: Optional[R],
        response_cls: type[TResponse],
        invoke: Invoke,
    ) -> TResponse:
        """Run *invoke* once on the caller's thread and return its response."""
        core = self._core(request, response_cls, invoke)
        done, value = _advance(core)
        if done:
            return value
        done, value = _advance(core, value)
        if not done:
            raise RuntimeError("dispatch core yielded more than once")
        return value

    async def dispatch_async(
        self,
        request: Optional[R],
        response_cls: type[TResponse],
        invoke: InvokeAsync,
    ) -> TResponse:
        """Await *invoke* once and return its response.

        Cancelling the awaiting task cancels the in-flight transport call and
        surfaces as :class:`asyncio.CancelledError`.
        """
        core = self._core(request, response_cls, invoke)
        try:
            done, value = _advance(core)
            if done:
                return value
            try:
                result = await value
            except _TRANSPORT_FAULTS as exc:
                done, value = _advance(core, error=exc)
            else:
                done, value = _advance(core, result)
            if not done:
                raise RuntimeError("dispatch core yielded more than once")
            return value
        finally:
            core.close()

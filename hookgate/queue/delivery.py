"""Delivery backends for queued events.

A deliverer is anything with an async ``deliver(event)`` method that returns
a :class:`DeliveryResult`. Raising is also treated as a failed attempt by the
processor, so backends may signal errors either way.
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Union, runtime_checkable

import httpx
import structlog

from .exceptions import DeliveryError
from .models import DeliveryResult, Event

logger = structlog.get_logger()


@runtime_checkable
class Deliverer(Protocol):
    """Pluggable delivery capability."""

    async def deliver(self, event: Event) -> DeliveryResult:
        ...


class LoggingDeliverer:
    """Logs each event and reports success.

    Used when no downstream target is configured.
    """

    async def deliver(self, event: Event) -> DeliveryResult:
        logger.info("Processing event", event_type=event.event_type)
        return DeliveryResult.SUCCESS

    async def aclose(self) -> None:
        pass


class HttpDeliverer:
    """Forwards events as JSON to a downstream URL."""

    def __init__(
        self,
        target_url: str,
        timeout: Optional[float] = 10.0,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.target_url = target_url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, headers=headers)

    async def deliver(self, event: Event) -> DeliveryResult:
        try:
            response = await self.client.post(self.target_url, json=event.to_dict())
        except httpx.HTTPError as e:
            raise DeliveryError(
                f"Failed to forward {event.event_type} to {self.target_url}: {e}",
                event_type=event.event_type,
            ) from e

        if response.is_success:
            logger.info(
                "Event forwarded",
                event_type=event.event_type,
                target=self.target_url,
                status_code=response.status_code,
            )
            return DeliveryResult.SUCCESS

        raise DeliveryError(
            f"Target responded with status {response.status_code}",
            event_type=event.event_type,
            status_code=response.status_code,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


DeliveryFunc = Callable[[Event], Union[DeliveryResult, bool, Awaitable[Any]]]


class CallableDeliverer:
    """Adapts a plain sync or async function into a deliverer.

    The function may return a :class:`DeliveryResult` or a bool.
    """

    def __init__(self, func: DeliveryFunc):
        self.func = func

    async def deliver(self, event: Event) -> DeliveryResult:
        result = self.func(event)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, DeliveryResult):
            return result
        return DeliveryResult.SUCCESS if result else DeliveryResult.FAILURE

    async def aclose(self) -> None:
        pass


def create_deliverer(target_url: Optional[str], timeout: Optional[float] = 10.0) -> Deliverer:
    """Build the deliverer for a configured target, if any."""
    if target_url:
        return HttpDeliverer(target_url, timeout=timeout)
    return LoggingDeliverer()

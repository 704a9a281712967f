"""
In-process domain event bus.

Mutating services publish domain events after they have flushed their
changes; subscribers run synchronously on the same database session, so
whatever they write is committed together with the mutation that caused it.
A subscriber that fails leaves nothing behind.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for domain events. Every event belongs to one sports event."""

    event_id: int


@dataclass(frozen=True)
class TeamAssigned(DomainEvent):
    participant_id: int
    team_id: int
    previous_team_id: Optional[int] = None


@dataclass(frozen=True)
class MatchCreated(DomainEvent):
    match_id: int


@dataclass(frozen=True)
class AnnouncementPosted(DomainEvent):
    announcement_id: int


Subscriber = Callable[[AsyncSession, DomainEvent], Awaitable[None]]


class EventBus:
    """Routes published domain events to their subscribers, in subscription order."""

    def __init__(self):
        self._subscribers: Dict[Type[DomainEvent], List[Subscriber]] = {}

    def subscribe(self, event_type: Type[DomainEvent], subscriber: Subscriber) -> None:
        """
        Register a subscriber for an event type.

        Subscribing the same callable twice is a no-op, so startup code can
        register unconditionally.

        Raises:
            TypeError: If subscriber is not callable
        """
        if not callable(subscriber):
            raise TypeError("subscriber must be callable")
        subscribers = self._subscribers.setdefault(event_type, [])
        if subscriber in subscribers:
            logger.debug(f"{subscriber.__name__} already subscribed to {event_type.__name__}")
            return
        subscribers.append(subscriber)
        logger.info(f"Subscribed {subscriber.__name__} to {event_type.__name__}")

    def unsubscribe(self, event_type: Type[DomainEvent], subscriber: Subscriber) -> None:
        """Remove a subscriber if it is registered."""
        subscribers = self._subscribers.get(event_type, [])
        if subscriber in subscribers:
            subscribers.remove(subscriber)

    def subscribers_for(self, event_type: Type[DomainEvent]) -> List[Subscriber]:
        return list(self._subscribers.get(event_type, []))

    def clear(self) -> None:
        """Drop every subscription."""
        self._subscribers.clear()

    async def publish(self, session: AsyncSession, event: DomainEvent) -> None:
        """
        Deliver an event to every subscriber of its type.

        Each subscriber runs inside its own SAVEPOINT. A failing subscriber
        has its writes rolled back, is logged and skipped; it never fails the
        mutation that published the event.
        """
        subscribers = self._subscribers.get(type(event), [])
        if not subscribers:
            logger.debug(f"No subscribers for {type(event).__name__}")
            return

        for subscriber in subscribers:
            try:
                async with session.begin_nested():
                    await subscriber(session, event)
            except Exception as e:
                logger.warning(
                    f"Subscriber {subscriber.__name__} failed for {type(event).__name__}: {e}",
                    exc_info=True,
                )


# Global event bus instance
_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get the global event bus instance."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus

"""
Domain events base classes and infrastructure.

Domain events represent something that happened in the domain.
They are used for decoupling modules, chiefly to feed the audit log.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events are immutable value objects that represent
    something that happened in the domain.
    """

    event_id: UUID
    occurred_at: datetime
    aggregate_id: str
    event_type: str

    # Audit classification, overridden by subclasses
    entity_type = "system"
    action = "event"
    actor_id = None

    def __init_subclass__(cls, **kwargs):
        """Automatically set event_type for subclasses."""
        super().__init_subclass__(**kwargs)
        cls.event_type = cls.__name__

    @staticmethod
    def base_fields(aggregate_id: Any, occurred_at: Optional[datetime] = None) -> Dict[str, Any]:
        """Common constructor arguments for subclasses."""
        return {
            "event_id": uuid4(),
            "occurred_at": occurred_at or datetime.now(timezone.utc),
            "aggregate_id": str(aggregate_id) if aggregate_id is not None else "",
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "event_type": self.event_type,
        }


class EventHandler(ABC):
    """
    Base class for event handlers.

    Event handlers process domain events asynchronously.
    """

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The domain event to handle
        """


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """

"""
HandlerRegistry - explicit event handler registration

Bounded Context: Routing typed domain events to handler functions
Responsibilities:
  - Register one handler per EventKind
  - Reject dispatch of events without a handler
  - Report which EventKinds are still unhandled (exhaustiveness check)

Threading: Thread-safe (uses lock for write operations)
Pattern: Registry with explicit registration
"""

import threading
from typing import Callable, Dict, Iterable, Set

from .events import DomainEvent, EventKind


class EventNotHandledError(Exception):
    """Raised when dispatching an event kind that has no registered handler"""
    pass


class HandlerRegistry:
    """
    Registry mapping EventKind to a handler with explicit registration.

    Key Features:
      - Fail-fast: double registration and unknown kinds are rejected
      - Exhaustiveness: missing() lists kinds nobody handles
      - Self-Documenting: each handler has a description

    Example:
        registry = HandlerRegistry()
        registry.register(EventKind.GROUP_DELETED, on_deleted, "Remove region")

        if registry.missing(EventKind):
            raise RuntimeError("unhandled events")

        registry.dispatch(GroupDeleted(group_id="g1"))
    """

    def __init__(self):
        self._handlers: Dict[EventKind, Callable[[DomainEvent], None]] = {}
        self._descriptions: Dict[EventKind, str] = {}
        self._lock = threading.Lock()

    def register(
        self,
        kind: EventKind,
        handler: Callable[[DomainEvent], None],
        description: str,
    ) -> None:
        """
        Register the handler of an event kind.

        Raises:
            ValueError: If kind already registered (double registration)
        """
        with self._lock:
            if kind in self._handlers:
                raise ValueError(f"Handler for '{kind.value}' already registered")

            self._handlers[kind] = handler
            self._descriptions[kind] = description

    def dispatch(self, event: DomainEvent) -> None:
        """
        Route an event to its handler.

        Raises:
            EventNotHandledError: If no handler is registered for event.kind
        """
        handler = self._handlers.get(event.kind)
        if handler is None:
            raise EventNotHandledError(
                f"Event '{event.kind.value}' not handled. "
                f"Handled events: {', '.join(sorted(k.value for k in self.handled_kinds))}"
            )
        handler(event)

    def is_handled(self, kind: EventKind) -> bool:
        return kind in self._handlers

    @property
    def handled_kinds(self) -> Set[EventKind]:
        """Snapshot of every registered kind."""
        return set(self._handlers.keys())

    def missing(self, kinds: Iterable[EventKind]) -> Set[EventKind]:
        """Kinds from `kinds` that have no handler."""
        return set(kinds) - self.handled_kinds

    def get_help(self) -> Dict[str, str]:
        """Event name → handler description."""
        return {kind.value: text for kind, text in self._descriptions.items()}

    def count(self) -> int:
        return len(self._handlers)

"""Checkout lifecycle hooks.

Provides a registry-based dispatch system for the checkout lifecycle. The
host (the ``registration`` app) fires events at fixed points of a request:
asset loading, section headings, field filtering, validation, order creation,
admin display, email templating and fee calculation. Customization apps
register named handler functions against those events.

Two kinds of handlers exist:

* **actions** are called for their side effects; ``do_action`` returns the
  list of non-``None`` results so that markup-producing actions can be
  collected and rendered by the caller.
* **filters** receive a value and return a (possibly new) value;
  ``apply_filters`` threads the value through every handler in turn.

Handlers run in ascending ``priority`` order, ties broken by registration
order.

Usage::

    from django_conference_checkout.hooks import CheckoutEvent, hooks

    hooks.add_filter(CheckoutEvent.CHECKOUT_FIELDS, my_fields, priority=20)
    fields = hooks.apply_filters(CheckoutEvent.CHECKOUT_FIELDS, fields, context)
"""

import enum
import itertools
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


class CheckoutEvent(enum.StrEnum):
    """Lifecycle events fired by the host during checkout."""

    ENQUEUE_ASSETS = "enqueue_assets"
    BEFORE_BILLING_FORM = "before_billing_form"
    CHECKOUT_FIELDS = "checkout_fields"
    CHECKOUT_PROCESS = "checkout_process"
    CREATE_ORDER = "create_order"
    ADMIN_ORDER_DATA = "admin_order_data"
    EMAIL_ORDER_META_FIELDS = "email_order_meta_fields"
    CALCULATE_FEES = "calculate_fees"


@dataclass
class CheckoutContext:
    """Request-scoped data handed to checkout handlers.

    Attributes:
        cart: The visitor's current cart, or ``None`` outside checkout.
        submitted: The submitted form data, field name to raw value.
        notices: Error messages collected by validation handlers; the host
            refuses to place the order while this is non-empty.
        on_checkout: Whether the current page is the checkout page.
        state: Per-request values handlers compute once and share.
    """

    cart: object | None = None
    submitted: Mapping[str, str] = field(default_factory=dict)
    notices: list[str] = field(default_factory=list)
    on_checkout: bool = False
    state: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Handler:
    """A registered callback with its ordering metadata."""

    callback: Callable[..., object]
    priority: int
    sequence: int


@dataclass
class HookRegistry:
    """Registry mapping checkout events to ordered handler lists."""

    _handlers: dict[CheckoutEvent, list[Handler]] = field(default_factory=dict)
    _counter: itertools.count = field(default_factory=itertools.count)

    def add_action(
        self,
        event: CheckoutEvent,
        callback: Callable[..., object],
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Register *callback* to run when *event* fires.

        Registering the same callback twice for one event replaces the earlier
        entry, so repeated app initialisation never doubles a handler.

        Args:
            event: The lifecycle event to listen for.
            callback: The handler function.
            priority: Lower numbers run first.
        """
        event = CheckoutEvent(event)
        handlers = [h for h in self._handlers.get(event, []) if h.callback is not callback]
        handlers.append(Handler(callback=callback, priority=priority, sequence=next(self._counter)))
        handlers.sort(key=lambda h: (h.priority, h.sequence))
        self._handlers[event] = handlers

    add_filter = add_action

    def remove(self, event: CheckoutEvent, callback: Callable[..., object]) -> bool:
        """Unregister *callback* from *event*.

        Returns:
            ``True`` if a handler was removed.
        """
        event = CheckoutEvent(event)
        handlers = self._handlers.get(event, [])
        remaining = [h for h in handlers if h.callback is not callback]
        self._handlers[event] = remaining
        return len(remaining) != len(handlers)

    def clear(self, event: CheckoutEvent | None = None) -> None:
        """Drop every handler for *event*, or for all events when omitted."""
        if event is None:
            self._handlers.clear()
        else:
            self._handlers.pop(CheckoutEvent(event), None)

    def handlers(self, event: CheckoutEvent) -> list[Callable[..., object]]:
        """Return the callbacks registered for *event* in execution order."""
        return [h.callback for h in self._handlers.get(CheckoutEvent(event), [])]

    def has_handlers(self, event: CheckoutEvent) -> bool:
        """Return whether anything listens to *event*."""
        return bool(self._handlers.get(CheckoutEvent(event)))

    def do_action(self, event: CheckoutEvent, *args: object) -> list[object]:
        """Run every handler for *event* and collect their results.

        Args:
            event: The lifecycle event being fired.
            *args: Positional arguments passed to each handler.

        Returns:
            The non-``None`` return values, in execution order.
        """
        results = []
        for callback in self.handlers(event):
            result = callback(*args)
            if result is not None:
                results.append(result)
        logger.debug("Fired %s to %d handler(s)", event, len(self.handlers(event)))
        return results

    def apply_filters(self, event: CheckoutEvent, value: object, *args: object) -> object:
        """Thread *value* through every handler for *event*.

        Each handler is called as ``handler(value, *args)`` and its return
        value becomes the input to the next handler.

        Returns:
            The value returned by the last handler, or *value* unchanged when
            nothing is registered.
        """
        for callback in self.handlers(event):
            value = callback(value, *args)
        return value


hooks = HookRegistry()

"""Transient "cart opened" signal shown after an artwork is added.

The mini-cart opens when an item lands in the cart and closes itself after a
few seconds. The delay lives here, in the UI layer, as a cancellable task;
the cart aggregate knows nothing about it.
"""

import threading

import structlog

from marketplace.cart.events import CartItemAdded

logger = structlog.get_logger(__name__)

DEFAULT_REVEAL_SECONDS = 3.0


def timer_scheduler(delay, callback):
    """Run ``callback`` after ``delay`` seconds on a daemon thread.

    Returns a handle exposing ``cancel()``.
    """
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class CartReveal:
    def __init__(self, delay=DEFAULT_REVEAL_SECONDS, scheduler=timer_scheduler, on_change=None):
        self.delay = delay
        self.scheduler = scheduler
        self.on_change = on_change
        self.visible = False
        self._pending = None
        self._generation = 0
        self._lock = threading.RLock()

    def _set_visible(self, visible):
        changed = self.visible != visible
        self.visible = visible
        if changed and self.on_change is not None:
            self.on_change(visible)

    def show(self):
        """Open the cart and (re)start the auto-hide countdown."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = self.scheduler(self.delay, lambda: self._expire(generation))
            self._set_visible(True)

    def hide(self):
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            self._set_visible(False)

    def _expire(self, generation):
        with self._lock:
            if generation != self._generation:
                return
            self._pending = None
            self._set_visible(False)

    def handle_event(self, event):
        if isinstance(event, CartItemAdded):
            logger.debug("Revealing cart", artwork_id=event.artwork_id)
            self.show()

    def attach(self, cart_session):
        """Open the cart whenever an item is added through ``cart_session``."""
        return cart_session.subscribe(self.handle_event)

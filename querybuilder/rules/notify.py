"""
Change/touch notification.

Two independent lists of zero-argument subscribers. Every mutating
operation runs inside burst(); the outermost burst fires on_touched then
on_change exactly once, and only if something was marked dirty.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

Listener = Callable[[], None]


class ChangeNotifier:
    """
    Observer registry with batched delivery.

    Usage:
        notifier = ChangeNotifier()
        unsubscribe = notifier.on_change(lambda: print("changed"))

        with notifier.burst():
            ...                      # several internal writes
            notifier.mark_dirty()
        # -> touched + changed delivered once here
    """

    def __init__(self):
        self._change_listeners: list[Listener] = []
        self._touched_listeners: list[Listener] = []
        self._depth = 0
        self._dirty = False

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to change events. Returns an unsubscribe function."""
        self._change_listeners.append(listener)
        return lambda: self._remove(self._change_listeners, listener)

    def on_touched(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to touch events. Returns an unsubscribe function."""
        self._touched_listeners.append(listener)
        return lambda: self._remove(self._touched_listeners, listener)

    @staticmethod
    def _remove(listeners: list[Listener], listener: Listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def mark_dirty(self) -> None:
        self._dirty = True

    @property
    def in_burst(self) -> bool:
        return self._depth > 0

    @contextmanager
    def burst(self) -> Iterator["ChangeNotifier"]:
        """
        Group writes into one logical notification.

        Nested bursts merge into the outermost one. If the body raises, the
        dirty flag is dropped and nothing is delivered.
        """
        self._depth += 1
        try:
            yield self
        except BaseException:
            if self._depth == 1:
                self._dirty = False
            raise
        finally:
            self._depth -= 1

        if self._depth == 0 and self._dirty:
            self._dirty = False
            self._emit()

    def _emit(self) -> None:
        # Snapshot: listeners may unsubscribe while being called
        for listener in list(self._touched_listeners):
            listener()
        for listener in list(self._change_listeners):
            listener()

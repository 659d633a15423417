"""Minimal subscribe/notify mechanism for editor state."""

from __future__ import annotations

from typing import Callable, List


Listener = Callable[[str], None]


class Observable:
    """Single source of truth with any number of read-only subscribers.

    Listeners receive the name of the change (``"players"``, ``"perspective"``
    and so on) and read whatever state they need from the owner.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: str) -> None:
        for listener in list(self._listeners):
            listener(change)

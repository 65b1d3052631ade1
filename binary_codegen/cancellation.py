"""
Cooperative cancellation for generation passes.
"""

from __future__ import annotations

import threading

from .errors import GenerationCancelled


class CancellationToken:
    """A flag shared by every worker of one generation pass.

    Resolvers and emitters call ``throw_if_cancelled`` once per member they
    visit, so a cancelled pass stops at the next member boundary.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def throw_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelled("Generation was cancelled")

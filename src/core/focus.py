"""
Focus-on-error coordination.

During a validation pass every field that fails reports itself to the form's
``ErrorFocusCoordinator``. The coordinator remembers the failing fields in
registration order and, once the pass is over, moves keyboard focus to the
first of them. A short cooldown keeps a burst of validation calls from
producing more than one focus request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from .config import FOCUS_COOLDOWN_MS
from .scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class FocusHandle(Protocol):
    """Host handle able to move keyboard focus to one field."""

    @property
    def can_request_focus(self) -> bool: ...

    def request_focus(self) -> None: ...

    def unfocus(self) -> None: ...


class FocusNode:
    """
    Framework-free focus handle.

    Nodes created from the same ``FocusScope`` share a single focus owner.
    """

    def __init__(self, name: str = "", scope: FocusScope | None = None):
        self.name = name
        self.scope = scope
        self.can_focus = True
        self._has_focus = False
        self._disposed = False
        self.focus_count = 0

    @property
    def has_focus(self) -> bool:
        return self._has_focus

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def can_request_focus(self) -> bool:
        return self.can_focus and not self._disposed

    def request_focus(self) -> None:
        if not self.can_request_focus:
            return
        if self.scope is not None:
            self.scope.clear_focus()
            self.scope.focused = self
        self._has_focus = True
        self.focus_count += 1

    def unfocus(self) -> None:
        self._has_focus = False
        if self.scope is not None and self.scope.focused is self:
            self.scope.focused = None

    def dispose(self) -> None:
        self.unfocus()
        self._disposed = True

    def __repr__(self) -> str:
        return f"FocusNode({self.name!r})"


class FocusScope:
    """Group of focus nodes of which at most one holds focus."""

    def __init__(self) -> None:
        self.focused: FocusNode | None = None

    def create_node(self, name: str = "") -> FocusNode:
        return FocusNode(name, scope=self)

    def clear_focus(self) -> None:
        if self.focused is not None:
            self.focused.unfocus()


class FocusState(Enum):
    """Dispatch state of a coordinator."""

    IDLE = "idle"
    PENDING = "pending"
    DISPATCHING = "dispatching"


class ErrorFocusCoordinator:
    """
    Ordered registry of failing fields plus a debounced focus dispatch.

    Registry changes happen synchronously inside the validation call; the
    dispatch runs after the host's current event-loop pass, so it always
    sees the whole validation pass.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        clear_focus: Callable[[], None] | None = None,
        cooldown_ms: int = FOCUS_COOLDOWN_MS,
    ):
        self._scheduler = scheduler
        self._clear_focus = clear_focus
        self._cooldown_ms = cooldown_ms
        self._registry: dict[FocusHandle, None] = {}
        self._state = FocusState.IDLE
        self._guarded = False
        self._dispatch_handle: TimerHandle | None = None
        self._cooldown_handle: TimerHandle | None = None
        self._disposed = False

    @property
    def state(self) -> FocusState:
        return self._state

    @property
    def registry(self) -> list[FocusHandle]:
        """Fields currently registered, in registration order."""
        return list(self._registry)

    @property
    def is_guarded(self) -> bool:
        """Whether a dispatch happened within the cooldown window."""
        return self._guarded

    def report(self, field: FocusHandle, error: str | None) -> None:
        """
        Record the outcome of validating one field.

        Args:
            field: Focus handle of the validated field
            error: Error message, or None when the field is valid
        """
        if self._disposed:
            return

        if error is None:
            self.discard(field)
            return

        if field not in self._registry:
            self._registry[field] = None
            logger.debug(f"Registered {field!r} in error ({len(self._registry)} pending)")

        if self._guarded:
            self._restart_cooldown()
            return

        self._schedule_dispatch()

    def discard(self, field: FocusHandle) -> None:
        """Remove a field that became valid, without dispatching."""
        if field in self._registry:
            del self._registry[field]
            logger.debug(f"Removed {field!r} from error registry")

    def _schedule_dispatch(self) -> None:
        if self._dispatch_handle is not None and self._dispatch_handle.is_active():
            return
        self._state = FocusState.PENDING
        self._dispatch_handle = self._scheduler.call_after_frame(self._dispatch)

    def _dispatch(self) -> None:
        self._dispatch_handle = None
        self._state = FocusState.DISPATCHING
        target = next(iter(self._registry), None)
        try:
            if target is not None:
                self._focus(target)
        finally:
            self._registry.clear()
            self._state = FocusState.IDLE

        if target is not None:
            self._guarded = True
            self._restart_cooldown()

    def _focus(self, target: FocusHandle) -> None:
        if not target.can_request_focus:
            logger.debug(f"Skipping focus on {target!r}: it can no longer take focus")
            return
        if self._clear_focus is not None:
            self._clear_focus()
        logger.debug(f"Moving focus to {target!r}")
        target.request_focus()

    def _restart_cooldown(self) -> None:
        if self._cooldown_handle is not None:
            self._cooldown_handle.cancel()
        self._cooldown_handle = self._scheduler.call_later(self._cooldown_ms, self._release_guard)

    def _release_guard(self) -> None:
        self._cooldown_handle = None
        self._guarded = False
        if self._registry and not self._disposed:
            self._schedule_dispatch()

    def dispose(self) -> None:
        """Cancel pending work and forget every registered field."""
        self._disposed = True
        for handle in (self._dispatch_handle, self._cooldown_handle):
            if handle is not None:
                handle.cancel()
        self._dispatch_handle = None
        self._cooldown_handle = None
        self._registry.clear()
        self._state = FocusState.IDLE
        self._guarded = False

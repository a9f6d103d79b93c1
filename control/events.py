"""
Events the core reports to its observers.

Observers either subclass GameListener and react to callbacks directly,
or use EventQueue to receive the same information as event objects on
a single consumer queue (e.g. a UI thread polling between frames).
"""

import queue
import time
from dataclasses import dataclass
from typing import List, Optional, Type

from logic.game_session import GameOutcome
from round_timer.round_clock import TimerListener


class AIListener:
    """
    Receives AI turn events. All methods are no-ops by default.
    Callbacks arrive on the AI worker thread.
    """

    def on_ai_thinking(self):
        pass

    def on_ai_progress(self, message: str):
        pass

    def on_ai_move_completed(self, row: int, col: int):
        pass

    def on_ai_error(self, message: str):
        pass


class GameListener(TimerListener, AIListener):
    """Everything the controller reports: timer, AI and round results."""

    def on_round_finished(self, outcome: GameOutcome, elapsed_seconds: int, move_count: int):
        pass


# ==================== EVENT OBJECTS ====================

@dataclass(frozen=True)
class RoundStarted:
    pass


@dataclass(frozen=True)
class TimerUpdate:
    seconds_remaining: int


@dataclass(frozen=True)
class TimerWarning:
    pass


@dataclass(frozen=True)
class TimerFinished:
    pass


@dataclass(frozen=True)
class AIThinking:
    pass


@dataclass(frozen=True)
class AIProgress:
    message: str


@dataclass(frozen=True)
class AIMoveCompleted:
    row: int
    col: int


@dataclass(frozen=True)
class AIError:
    message: str


@dataclass(frozen=True)
class RoundFinished:
    outcome: GameOutcome
    elapsed_seconds: int
    move_count: int


class EventQueue(GameListener):
    """
    GameListener that turns every callback into an event object on a
    thread-safe queue, for one consumer to read at its own pace.
    """

    def __init__(self, maxsize: int = 0):
        self.events: "queue.Queue" = queue.Queue(maxsize=maxsize)

    # Listener callbacks -> events

    def on_round_started(self):
        self.events.put(RoundStarted())

    def on_timer_update(self, seconds_remaining: int):
        self.events.put(TimerUpdate(seconds_remaining))

    def on_timer_warning(self):
        self.events.put(TimerWarning())

    def on_timer_finished(self):
        self.events.put(TimerFinished())

    def on_ai_thinking(self):
        self.events.put(AIThinking())

    def on_ai_progress(self, message: str):
        self.events.put(AIProgress(message))

    def on_ai_move_completed(self, row: int, col: int):
        self.events.put(AIMoveCompleted(row, col))

    def on_ai_error(self, message: str):
        self.events.put(AIError(message))

    def on_round_finished(self, outcome, elapsed_seconds, move_count):
        self.events.put(RoundFinished(outcome, elapsed_seconds, move_count))

    # Consumer side

    def get(self, timeout: Optional[float] = None):
        """Next event, or None if nothing arrived within `timeout`."""
        try:
            return self.events.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[object]:
        """Everything queued right now, oldest first."""
        drained = []
        while True:
            try:
                drained.append(self.events.get_nowait())
            except queue.Empty:
                return drained

    def wait_for(self, event_type: Type, timeout: float = 5.0, seen: Optional[List[object]] = None):
        """
        Consume events until one of `event_type` arrives.

        Args:
            event_type: Event class to wait for.
            timeout: Overall time limit in seconds.
            seen: If given, every consumed event is appended to it.

        Returns:
            The matching event, or None on timeout.
        """
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            event = self.get(timeout=remaining)
            if event is None:
                return None
            if seen is not None:
                seen.append(event)
            if isinstance(event, event_type):
                return event

"""
Round clock for the TicTacToe core.

Counts a round down in its own thread and reports to a TimerListener.
The clock knows nothing about the game; the controller decides what
running out of time means.
"""

import logging
import threading
import time
from enum import Enum
from typing import Optional

from .config import TimerConfig


logger = logging.getLogger(__name__)


class ClockState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class TimerListener:
    """
    Receives round clock events. All methods are no-ops by default.

    Callbacks arrive on the clock's thread (except on_round_started,
    which arrives on the thread that called start()).
    """

    def on_round_started(self):
        pass

    def on_timer_update(self, seconds_remaining: int):
        pass

    def on_timer_warning(self):
        pass

    def on_timer_finished(self):
        pass


class RoundClock:
    """
    Countdown clock with pause/resume.

    State machine: IDLE -> RUNNING <-> PAUSED -> FINISHED, and stop()
    returns to IDLE from anywhere. Remaining time only ever moves
    between 0 and the configured duration.
    """

    def __init__(
        self,
        listener: Optional[TimerListener] = None,
        config: Optional[TimerConfig] = None
    ):
        self.config = config or TimerConfig()
        if not 0 <= self.config.WARNING_THRESHOLD_S < self.config.ROUND_DURATION_S:
            raise ValueError(
                f"Warning threshold {self.config.WARNING_THRESHOLD_S}s must be "
                f"below round duration {self.config.ROUND_DURATION_S}s"
            )
        self.listener = listener or TimerListener()

        self._lock = threading.Lock()
        self._state = ClockState.IDLE
        self._remaining = self.config.ROUND_DURATION_S
        self._warning_sent = False
        self._start_time: Optional[float] = None
        self._thread: Optional[threading.Thread] = None
        # Cancellation token for the current run; replaced on every start()
        self._stop_event = threading.Event()

    # ==================== CONTROL ====================

    def start(self, spawn_thread: bool = True):
        """
        Start a fresh countdown.

        Does nothing while already running or paused.

        Args:
            spawn_thread: If False, no tick thread is started and the
                caller drives the clock with tick().
        """
        with self._lock:
            if self._state in (ClockState.RUNNING, ClockState.PAUSED):
                return

            # Retire any previous loop before the new run begins
            self._stop_event.set()
            self._stop_event = threading.Event()

            self._remaining = self.config.ROUND_DURATION_S
            self._warning_sent = False
            self._start_time = time.monotonic()
            self._state = ClockState.RUNNING
            stop_event = self._stop_event

        logger.debug("Round clock started (%ss)", self.config.ROUND_DURATION_S)
        self._notify("on_round_started")

        if spawn_thread:
            thread = threading.Thread(
                target=self._run,
                args=(stop_event,),
                name=self.config.THREAD_NAME,
                daemon=True
            )
            self._thread = thread
            thread.start()

    def pause(self):
        with self._lock:
            if self._state is ClockState.RUNNING:
                self._state = ClockState.PAUSED

    def resume(self):
        with self._lock:
            if self._state is ClockState.PAUSED:
                self._state = ClockState.RUNNING

    def stop(self, wait: bool = False):
        """
        Stop the countdown and return to IDLE. Safe to call repeatedly.

        Args:
            wait: Join the tick thread (ignored when called from it).
        """
        with self._lock:
            self._stop_event.set()
            if self._state is not ClockState.FINISHED:
                self._state = ClockState.IDLE
            thread = self._thread

        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.config.TICK_INTERVAL_S * 2)

    # ==================== TICKING ====================

    def tick(self) -> bool:
        """
        Advance the clock by one tick.

        While running: decrement, notify the new value, fire the warning
        the first time the threshold is reached and finish at zero.
        While paused nothing changes.

        Returns:
            True if the clock should keep ticking.
        """
        return self._tick(self._stop_event)

    def _tick(self, stop_event: threading.Event) -> bool:
        with self._lock:
            # A loop from an earlier run must not touch the current one
            if stop_event is not self._stop_event or stop_event.is_set():
                return False
            if self._state is ClockState.PAUSED:
                return True
            if self._state is not ClockState.RUNNING:
                return False

            self._remaining = max(0, self._remaining - 1)
            remaining = self._remaining

            warn = remaining == self.config.WARNING_THRESHOLD_S and not self._warning_sent
            if warn:
                self._warning_sent = True

            finished = remaining == 0
            if finished:
                self._state = ClockState.FINISHED

        self._notify("on_timer_update", remaining)
        if warn:
            self._notify("on_timer_warning")
        if finished:
            logger.debug("Round clock finished")
            self._notify("on_timer_finished")
        return not finished

    def _run(self, stop_event: threading.Event):
        """Tick loop, one tick per interval until stopped or finished."""
        interval = self.config.TICK_INTERVAL_S
        try:
            # wait() returns True once stop() sets the token
            while not stop_event.wait(interval):
                if not self._tick(stop_event):
                    break
        finally:
            logger.debug("Round clock loop exited")

    def _notify(self, method: str, *args):
        try:
            getattr(self.listener, method)(*args)
        except Exception:
            logger.exception("Timer listener %s failed", method)

    # ==================== READ ACCESSORS ====================

    @property
    def state(self) -> ClockState:
        with self._lock:
            return self._state

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    def is_running(self) -> bool:
        """True while a countdown is in progress (paused counts as running)."""
        return self.state in (ClockState.RUNNING, ClockState.PAUSED)

    def is_paused(self) -> bool:
        return self.state is ClockState.PAUSED

    def elapsed_time(self) -> int:
        """Seconds of the round used so far."""
        return self.config.ROUND_DURATION_S - self.remaining

    def wall_time(self) -> float:
        """Wall-clock seconds since start(), including pauses."""
        if self._start_time is None:
            return 0.0
        return time.monotonic() - self._start_time

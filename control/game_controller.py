"""
Main orchestration for the TicTacToe core.

This module ties together:
- Logic (game session, AI strategies, statistics)
- Round timer (countdown running in its own thread)

Game flow:
1. A new round resets the board and starts the clock
2. A human marks a cell through play_move()
3. If the AI is next, it thinks on a worker thread and plays its reply
4. Repeat until someone wins, the board fills up, or time runs out
"""

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import numpy as np

from logic.ai_player import AIPlayer, Difficulty, SearchCancelled, create_ai
from logic.config import GameConfig
from logic.game_session import GameSession
from logic.player import Player
from logic.statistics import RunningStatistics
from round_timer.config import TimerConfig
from round_timer.round_clock import RoundClock, ClockState, TimerListener

from .events import GameListener


logger = logging.getLogger(__name__)

StrategyFactory = Callable[..., AIPlayer]


class GameController(TimerListener):
    """
    Owns the session, the round clock and the AI, and sequences turns.

    Supports both player-vs-AI (ai_player set) and two humans on one
    board (ai_player=None). At most one AI computation is live at a
    time; finishing or restarting a round cancels it and its result is
    thrown away.
    """

    def __init__(
        self,
        listener: Optional[GameListener] = None,
        difficulty: Difficulty = Difficulty.EASY,
        ai_player: Optional[Player] = Player.O,
        game_config: Optional[GameConfig] = None,
        timer_config: Optional[TimerConfig] = None,
        strategy_factory: StrategyFactory = create_ai,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the controller.

        Args:
            listener: Observer for timer, AI and round events.
            difficulty: Starting AI tier.
            ai_player: Which player the AI controls, or None for two humans.
            game_config: Board and AI settings.
            timer_config: Round clock settings.
            strategy_factory: Builds a strategy for (difficulty, player).
            rng: Random source handed to the strategies.
        """
        self.listener = listener or GameListener()
        self.game_config = game_config or GameConfig()
        self.ai_player = ai_player
        self.rng = rng or random.Random()
        self._strategy_factory = strategy_factory

        self.session = GameSession(self.game_config)
        self.clock = RoundClock(self, timer_config)
        self.statistics = RunningStatistics()

        self._lock = threading.RLock()
        self._difficulty = difficulty
        self._pending_difficulty: Optional[Difficulty] = None
        self.strategy: Optional[AIPlayer] = self._build_strategy(difficulty)

        # One worker: AI turns never overlap
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ai-turn")
        self._ai_cancel: Optional[threading.Event] = None
        self._ai_pending = False
        self._round_active = False

    # ==================== ROUND LIFECYCLE ====================

    def start_new_round(self):
        """Reset the board, restart the clock and let the AI open if it moves first."""
        with self._lock:
            self._cancel_ai_turn()
            self.clock.stop()

            if self._pending_difficulty is not None:
                self._apply_difficulty(self._pending_difficulty)
                self._pending_difficulty = None

            self.session.reset()
            self._round_active = True
            logger.info("New round (difficulty %s)", self._difficulty.name)
            self.clock.start()

            if self.is_ai_turn():
                self._trigger_ai_turn()

    def play_move(self, row: int, col: int) -> bool:
        """
        Mark a cell for the human whose turn it is.

        Rejected while the clock isn't running (including paused), once
        the round is over, while the AI is thinking, or on the AI's turn.

        Returns:
            True if the move was applied.
        """
        with self._lock:
            if self.clock.state is not ClockState.RUNNING:
                logger.debug("Move (%s, %s) ignored: clock not running", row, col)
                return False
            if self.session.is_finished():
                logger.debug("Move (%s, %s) ignored: round finished", row, col)
                return False
            if self._ai_pending or self.is_ai_turn():
                logger.debug("Move (%s, %s) ignored: AI's turn", row, col)
                return False

            if not self.session.apply_move(row, col):
                return False

            self._after_move()
            return True

    def pause(self):
        self.clock.pause()

    def resume(self):
        self.clock.resume()

    def shutdown(self):
        """Cancel everything and release the worker thread."""
        with self._lock:
            self._cancel_ai_turn()
            self._round_active = False
            self.clock.stop()
        self._executor.shutdown(wait=True)
        logger.debug("Controller shut down")

    def _after_move(self):
        if self.session.is_finished():
            self._finish_round()
        elif self.is_ai_turn():
            self._trigger_ai_turn()

    def _finish_round(self):
        """Stop the clock, record the round once and report it."""
        if not self._round_active:
            return
        self._round_active = False

        self.clock.stop()
        self._cancel_ai_turn()

        outcome = self.session.outcome
        elapsed = self.clock.elapsed_time()
        moves = self.session.move_count
        self.statistics.record_round(outcome, elapsed)
        logger.info("Round finished: %s after %ss and %d moves", outcome.value, elapsed, moves)

        self._notify("on_round_finished", outcome, elapsed, moves)

    # ==================== AI TURNS ====================

    def is_ai_turn(self) -> bool:
        return (
            self.ai_player is not None
            and not self.session.is_finished()
            and self.session.current_player is self.ai_player
        )

    @property
    def ai_pending(self) -> bool:
        with self._lock:
            return self._ai_pending

    def _trigger_ai_turn(self):
        if self.strategy is None:
            return
        if self._ai_pending:
            logger.warning("AI turn already in progress; not starting another")
            return

        self._cancel_ai_turn()
        token = threading.Event()
        self._ai_cancel = token
        self._ai_pending = True

        self._executor.submit(
            self._run_ai_turn,
            self.strategy,
            self._difficulty,
            self.session.snapshot(),
            token
        )

    def _run_ai_turn(
        self,
        strategy: AIPlayer,
        difficulty: Difficulty,
        board: np.ndarray,
        token: threading.Event
    ):
        """Compute the AI's move (runs on the worker thread)."""
        # Cancelled while still queued behind an earlier turn
        if token.is_set():
            logger.debug("AI turn cancelled before it started")
            return

        try:
            self._notify_while_live(token, "on_ai_thinking")

            for index, message in enumerate(difficulty.progress_messages):
                if index and token.wait(self.game_config.HARD_PROGRESS_DELAY_S):
                    raise SearchCancelled()
                self._notify_while_live(token, "on_ai_progress", message)

            move = strategy.select_move(board, cancel_event=token)

        except SearchCancelled:
            logger.debug("AI computation cancelled")
            return
        except Exception as e:
            logger.exception("AI computation failed")
            with self._lock:
                if self._is_live(token):
                    self._clear_ai_turn()
                    self._notify("on_ai_error", f"AI calculation error: {e}")
            return

        self._complete_ai_turn(token, move)

    def _complete_ai_turn(self, token: threading.Event, move):
        """Apply the AI's move if its turn is still current."""
        with self._lock:
            if not self._is_live(token):
                logger.debug("Discarding stale AI move %s", move)
                return
            self._clear_ai_turn()

            # Clock hit zero but the timeout has not been handled yet
            if self.clock.state is ClockState.FINISHED:
                logger.debug("Discarding AI move %s: round clock finished", move)
                return

            if move is None:
                self._notify("on_ai_error", "No available moves")
                return

            row, col = move
            # The clock may have ended the round while the AI was thinking
            if not self.session.apply_move(row, col):
                if self.session.is_finished():
                    logger.debug("Round ended before AI move %s could be applied", move)
                else:
                    self._notify("on_ai_error", f"AI chose an illegal move ({row}, {col})")
                return

            self._notify("on_ai_move_completed", row, col)
            self._after_move()

    def _is_live(self, token: threading.Event) -> bool:
        return token is self._ai_cancel and not token.is_set()

    def _notify_while_live(self, token: threading.Event, method: str, *args):
        """Report AI progress, or raise SearchCancelled if the turn was dropped."""
        with self._lock:
            if not self._is_live(token):
                raise SearchCancelled()
            self._notify(method, *args)

    def _clear_ai_turn(self):
        self._ai_cancel = None
        self._ai_pending = False

    def _cancel_ai_turn(self):
        if self._ai_cancel is not None:
            self._ai_cancel.set()
            logger.debug("Cancelled in-flight AI computation")
        self._clear_ai_turn()

    # ==================== DIFFICULTY ====================

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    def set_difficulty(self, difficulty: Difficulty) -> bool:
        """
        Change the AI tier.

        Takes effect now between rounds; during a round it is held until
        the next start_new_round().

        Returns:
            True if the new tier is already active.
        """
        with self._lock:
            if self._round_active:
                self._pending_difficulty = difficulty
                logger.info("Difficulty %s will apply from the next round", difficulty.name)
                return False
            self._apply_difficulty(difficulty)
            return True

    def _apply_difficulty(self, difficulty: Difficulty):
        self._difficulty = difficulty
        self.strategy = self._build_strategy(difficulty)

    def _build_strategy(self, difficulty: Difficulty) -> Optional[AIPlayer]:
        if self.ai_player is None:
            return None
        return self._strategy_factory(
            difficulty, self.ai_player, config=self.game_config, rng=self.rng
        )

    # ==================== STATISTICS ====================

    def reset_statistics(self):
        self.statistics.reset()

    @property
    def round_active(self) -> bool:
        with self._lock:
            return self._round_active

    # ==================== TIMER EVENTS ====================

    def on_round_started(self):
        self._notify("on_round_started")

    def on_timer_update(self, seconds_remaining: int):
        self._notify("on_timer_update", seconds_remaining)

    def on_timer_warning(self):
        self._notify("on_timer_warning")

    def on_timer_finished(self):
        self._notify("on_timer_finished")
        with self._lock:
            # Ignore a late signal from a clock that has since been restarted
            if not self._round_active or self.clock.state is not ClockState.FINISHED:
                return
            self.session.force_time_up()
            self._finish_round()

    def _notify(self, method: str, *args):
        try:
            getattr(self.listener, method)(*args)
        except Exception:
            logger.exception("Listener %s failed", method)

"""
Console front end for the TicTacToe core.

Play a timed round against the AI (or a friend) in the terminal:
- type "row col" to mark a cell, e.g. "1 1" for the centre
- n = new round, p = pause/resume, s = statistics, q = quit
"""

import logging
from typing import Optional

from logic.ai_player import Difficulty
from logic.game_session import GameOutcome
from logic.player import Player
from control.events import GameListener
from control.game_controller import GameController


class ConsoleListener(GameListener):
    """
    Prints core events as they arrive.
    Timer ticks are only shown every 10 seconds to keep the prompt readable.
    """

    def __init__(self):
        self.controller: Optional[GameController] = None

    def on_round_started(self):
        if self.controller:
            print(f"\n>>> New round! You have {self.controller.clock.config.ROUND_DURATION_S} seconds.")

    def on_timer_update(self, seconds_remaining: int):
        if seconds_remaining % 10 == 0 and seconds_remaining > 0:
            print(f"\n[{seconds_remaining}s left]")

    def on_timer_warning(self):
        print("\n⚠ Hurry up, time is almost up!")

    def on_timer_finished(self):
        print("\n⏰ Time's up!")

    def on_ai_thinking(self):
        print("\n>>> AI is thinking...")

    def on_ai_progress(self, message: str):
        print(f"    {message}")

    def on_ai_move_completed(self, row: int, col: int):
        print(f">>> AI played ({row}, {col})")
        if self.controller and not self.controller.session.is_finished():
            self.controller.session.print_board()

    def on_ai_error(self, message: str):
        print(f"ERROR: {message}")

    def on_round_finished(self, outcome: GameOutcome, elapsed_seconds: int, move_count: int):
        print("\n" + "="*60)
        print("   GAME OVER!")
        print("="*60)

        if self.controller:
            self.controller.session.print_board()

        print(f"\nTime elapsed: {elapsed_seconds}s   Moves made: {move_count}")
        if self.controller:
            print(f"Wall time (with pauses): {self.controller.clock.wall_time():.1f}s")
            print(f"Round number: {self.controller.statistics.total_rounds}")
        print("\nType 'n' for a new round or 'q' to quit.")


def print_statistics(controller: GameController):
    stats = controller.statistics
    print("\n" + "="*60)
    print("   Statistics")
    print("="*60)
    print(f"  X wins:       {stats.x_wins}")
    print(f"  O wins:       {stats.o_wins}")
    print(f"  Draws:        {stats.draws}")
    print(f"  Total rounds: {stats.total_rounds}")
    print(f"  Average time: {stats.average_time:.1f}s")
    print("="*60)


def run_console(controller: GameController):
    """Read commands from stdin until the user quits."""
    controller.start_new_round()
    controller.session.print_board()

    while True:
        command = input("\n> ").strip().lower()

        if command in ("q", "quit", "exit"):
            break
        elif command == "n":
            controller.start_new_round()
            controller.session.print_board()
        elif command == "p":
            if not controller.round_active:
                print("No round in progress.")
            elif controller.clock.is_paused():
                controller.resume()
                print("Resumed.")
            else:
                controller.pause()
                print("Paused.")
        elif command == "s":
            print_statistics(controller)
        else:
            parts = command.replace(",", " ").split()
            if len(parts) != 2 or not all(p.isdigit() for p in parts):
                print("Enter a move as 'row col' (0-2), or n/p/s/q.")
                continue

            row, col = int(parts[0]), int(parts[1])
            if controller.play_move(row, col):
                if not controller.session.is_finished():
                    controller.session.print_board()
            else:
                print("Invalid move!")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Timed TicTacToe against the computer")
    parser.add_argument(
        "--difficulty",
        choices=[d.name.lower() for d in Difficulty],
        default="easy",
        help="AI difficulty level"
    )
    parser.add_argument(
        "--ai-first",
        action="store_true",
        help="Let the AI play first (as X)"
    )
    parser.add_argument(
        "--two-player",
        action="store_true",
        help="Two humans on one board, no AI"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(threadName)s %(name)s: %(message)s"
    )

    # Determine players
    if args.two_player:
        ai_player = None
    elif args.ai_first:
        ai_player = Player.X
    else:
        ai_player = Player.O

    difficulty = Difficulty[args.difficulty.upper()]

    print("\n" + "="*60)
    print("   TicTacToe - Timed Round")
    if ai_player is None:
        print("   Mode: two players")
    else:
        profile = difficulty.profile
        print(f"   AI plays: {ai_player.symbol}  ({profile.label}: {profile.algorithm})")
    print("="*60)

    listener = ConsoleListener()
    controller = GameController(listener=listener, difficulty=difficulty, ai_player=ai_player)
    listener.controller = controller

    try:
        run_console(controller)
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    finally:
        controller.shutdown()
        print_statistics(controller)
        print("Goodbye!")


if __name__ == "__main__":
    main()

"""Game loop management and result tracking."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import random
import time

from .errors import InvalidGuessError
from .game import Configuration
from .session import GameSession


@dataclass
class GameResult:
    """Complete result of a finished (or abandoned) game."""
    config: dict  # Configuration as dict
    secret: list[int]
    turns: list[dict]
    outcome: str  # "win" | "loss" | "quit"
    total_turns: int
    timestamp: str
    duration_seconds: float


class GameRunner:
    """Drives a GameSession with a player until the game ends or the player quits."""

    def __init__(self, config: Configuration, player, secret: Optional[list[int]] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize game runner.

        Args:
            config: Game configuration
            player: Object with get_next_guess(session), reject(message) and
                game_over(session), e.g. ConsolePlayer
            secret: Optional predefined secret code
            rng: Optional random source for secret generation
        """
        self.config = config
        self.player = player
        self.predefined_secret = secret
        self.rng = rng

    def run(self) -> GameResult:
        """Play a complete game and return results."""
        start_time = time.time()
        session = GameSession(self.config, secret=self.predefined_secret, rng=self.rng)

        outcome = "quit"
        try:
            while not session.is_game_over():
                guess = self.player.get_next_guess(session)
                if guess is None:
                    break

                try:
                    session.submit_guess(guess)
                except InvalidGuessError as e:
                    # Rejected guesses are not recorded; the same row is played again
                    self.player.reject(str(e))
                    continue

        except KeyboardInterrupt:
            # Ctrl-C abandons the game; the turns played so far are still returned
            pass

        if session.is_game_over():
            outcome = "win" if session.won else "loss"
            self.player.game_over(session)

        duration = time.time() - start_time

        return GameResult(
            config=self.config.to_dict(),
            secret=list(session.reveal_secret()),
            turns=_turns_from_history(session),
            outcome=outcome,
            total_turns=session.current_attempt_index(),
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            duration_seconds=round(duration, 2),
        )


def _turns_from_history(session: GameSession) -> list[dict]:
    return [
        {
            "turn_number": i,
            "guess": list(attempt.guess),
            "black": attempt.score.black,
            "white": attempt.score.white,
        }
        for i, attempt in enumerate(session.history, 1)
    ]

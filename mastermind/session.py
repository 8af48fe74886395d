"""Game session state machine."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import random

from .errors import ConfigurationError, InvalidGuessError, SessionTerminatedError
from .game import Configuration, Score, SecretGenerator, is_winning_score, score_guess


class SessionStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class Attempt:
    """One submitted guess together with its score."""
    guess: tuple[int, ...]
    score: Score


class GameSession:
    """
    One play-through from secret generation to a win or a loss.

    The session is owned by a single caller; submissions are expected to be
    serialized by that caller.
    """

    def __init__(self, config: Configuration, secret: Optional[Sequence[int]] = None,
                 rng: Optional[random.Random] = None):
        """
        Start a new game.

        Args:
            config: Game configuration
            secret: Optional predefined secret. If None, generates random secret.
            rng: Optional random source used for secret generation

        Raises:
            ConfigurationError: If the configuration or predefined secret is invalid.
        """
        generator = SecretGenerator(config, rng)
        self.config = config

        if secret is None:
            self._secret = generator.generate()
        else:
            self._secret = self._check_secret(secret)

        self._history: list[Attempt] = []
        self._status = SessionStatus.IN_PROGRESS

    def _check_secret(self, secret: Sequence[int]) -> tuple[int, ...]:
        secret = tuple(secret)
        if len(secret) != self.config.hole_count:
            raise ConfigurationError(f"Secret must have {self.config.hole_count} values")
        if not all(self.config.is_legal_peg(x) for x in secret):
            raise ConfigurationError(
                f"Secret values must be in {list(self.config.legal_pegs)}"
            )
        if not self.config.duplicates_allowed and len(set(secret)) != len(secret):
            raise ConfigurationError("Secret repeats a peg but duplicates are not allowed")
        return secret

    def submit_guess(self, guess: Sequence[int]) -> Score:
        """
        Score a guess, record it and advance the game.

        Returns:
            The guess's Score.

        Raises:
            SessionTerminatedError: If the game has already been won or lost.
            InvalidGuessError: If the guess has the wrong length or an illegal peg.
        """
        if self._status is not SessionStatus.IN_PROGRESS:
            raise SessionTerminatedError(f"Game is over ({self._status.value})")

        guess = tuple(guess)
        if len(guess) != self.config.hole_count:
            raise InvalidGuessError(
                f"Guess must have exactly {self.config.hole_count} positions, got {len(guess)}"
            )
        illegal = [x for x in guess if not self.config.is_legal_peg(x)]
        if illegal:
            raise InvalidGuessError(
                f"Illegal peg value(s) {illegal}; allowed: {list(self.config.legal_pegs)}"
            )

        score = score_guess(self._secret, guess)
        self._history.append(Attempt(guess, score))

        if is_winning_score(score, self.config.hole_count):
            self._status = SessionStatus.WON
        elif len(self._history) == self.config.guess_limit:
            self._status = SessionStatus.LOST

        return score

    def reveal_secret(self) -> tuple[int, ...]:
        """Return the secret. Whether to show it is the caller's decision."""
        return self._secret

    def current_attempt_index(self) -> int:
        """Number of attempts made so far, i.e. the index of the next row to play."""
        return len(self._history)

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def history(self) -> tuple[Attempt, ...]:
        return tuple(self._history)

    @property
    def attempts_remaining(self) -> int:
        return self.config.guess_limit - len(self._history)

    @property
    def won(self) -> bool:
        return self._status is SessionStatus.WON

    def is_game_over(self) -> bool:
        """Check if game has ended (won or out of guesses)."""
        return self._status is not SessionStatus.IN_PROGRESS

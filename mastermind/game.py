"""Core Mastermind game logic: configuration, secret generation and scoring."""

from collections import Counter
from dataclasses import dataclass, asdict
from typing import NamedTuple, Optional, Sequence
import random

from .errors import ConfigurationError, InvalidGuessError


@dataclass(frozen=True)
class Configuration:
    """
    Immutable set of game parameters.

    The engine never reads persisted settings; callers build one of these
    (see settings.load_config) and pass it in. Construction does not
    validate, consumers call validate() before using it.
    """
    color_count: int = 8
    hole_count: int = 5
    guess_limit: int = 12
    duplicates_allowed: bool = True
    blanks_allowed: bool = False

    @property
    def blank_peg(self) -> Optional[int]:
        """Peg value reserved for "no peg", or None when blanks are off."""
        if self.blanks_allowed:
            return self.color_count + 1
        return None

    @property
    def legal_pegs(self) -> tuple[int, ...]:
        """Every peg value a secret or guess may contain, in ascending order."""
        pegs = list(range(1, self.color_count + 1))
        if self.blanks_allowed:
            pegs.append(self.blank_peg)
        return tuple(pegs)

    def is_legal_peg(self, value) -> bool:
        # bool is an int subclass; True must not pass as peg 1
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        return value in self.legal_pegs

    def validate(self) -> None:
        """
        Check the configuration is internally consistent.

        Raises:
            ConfigurationError: If a count is out of range, a flag is not a
                bool, or duplicates are disallowed with too few distinct pegs.
        """
        for name, minimum in (("color_count", 2), ("hole_count", 1), ("guess_limit", 1)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value < minimum:
                raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")

        for name in ("duplicates_allowed", "blanks_allowed"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} must be a boolean")

        if not self.duplicates_allowed and self.hole_count > len(self.legal_pegs):
            raise ConfigurationError(
                f"Need at least {self.hole_count} distinct pegs when duplicates are "
                f"not allowed, only {len(self.legal_pegs)} available"
            )

    def to_dict(self) -> dict:
        return asdict(self)


class Score(NamedTuple):
    """Feedback for one guess: (exact_matches, color_matches)."""
    exact_matches: int
    color_matches: int

    @property
    def black(self) -> int:
        return self.exact_matches

    @property
    def white(self) -> int:
        return self.color_matches


class SecretGenerator:
    """Produces random secrets that honor a configuration's duplicate/blank policy."""

    def __init__(self, config: Configuration, rng: Optional[random.Random] = None):
        """
        Args:
            config: Game configuration, validated here
            rng: Optional random source. If None, an unseeded Random is used.

        Raises:
            ConfigurationError: If the configuration is inconsistent.
        """
        config.validate()
        self.config = config
        self.rng = rng if rng is not None else random.Random()

    def generate(self) -> tuple[int, ...]:
        """Generate a new secret sequence."""
        pegs = self.config.legal_pegs
        length = self.config.hole_count

        if self.config.duplicates_allowed:
            return tuple(self.rng.choice(pegs) for _ in range(length))
        return tuple(self.rng.sample(pegs, length))


def generate_secret(config: Configuration, rng: Optional[random.Random] = None) -> tuple[int, ...]:
    """Generate a single secret for the given configuration."""
    return SecretGenerator(config, rng).generate()


def score_guess(secret: Sequence[int], guess: Sequence[int]) -> Score:
    """
    Score a guess against the secret using standard Mastermind rules.

    Algorithm:
    1. Count exact position matches (black pegs); those positions are
       consumed on both sides
    2. Put the remaining secret pegs in a frequency table
    3. Walk the remaining guess pegs left to right; each one still present
       in the table is a color match (white peg) and uses up one occurrence

    Raises:
        InvalidGuessError: If the guess and secret lengths differ.
    """
    if len(guess) != len(secret):
        raise InvalidGuessError(
            f"Guess must have exactly {len(secret)} positions, got {len(guess)}"
        )

    exact = 0
    secret_remaining = Counter()
    guess_remaining = []

    for secret_peg, guess_peg in zip(secret, guess):
        if secret_peg == guess_peg:
            exact += 1
        else:
            secret_remaining[secret_peg] += 1
            guess_remaining.append(guess_peg)

    color = 0
    for peg in guess_remaining:
        if secret_remaining[peg] > 0:
            secret_remaining[peg] -= 1
            color += 1

    return Score(exact, color)


def is_winning_score(score: Score, hole_count: int) -> bool:
    """A score wins only when every hole is an exact match."""
    return score.exact_matches == hole_count

"""Terminal interface for a human player."""

import random
import re
from typing import Callable, Optional

from tabulate import tabulate

from .errors import InvalidGuessError
from .game import Configuration, Score
from .session import GameSession

# Peg colors in value order: peg 1 is white, peg 2 is black, ...
COLOR_NAMES = ("white", "black", "red", "green", "blue", "yellow", "tan", "pink")
COLOR_LETTERS = ("W", "K", "R", "G", "B", "Y", "T", "P")
BLANK_LETTER = "_"

BLACK_CLUE = "B"
WHITE_CLUE = "W"
EMPTY_CLUE = "."


def peg_label(value: int, config: Configuration) -> str:
    """Short display label for a peg value."""
    if value == config.blank_peg:
        return BLANK_LETTER
    if config.color_count <= len(COLOR_LETTERS):
        return COLOR_LETTERS[value - 1]
    return str(value)


def describe_palette(config: Configuration) -> str:
    """One-line legend of the pegs a player may use."""
    parts = []
    for value in range(1, config.color_count + 1):
        if config.color_count <= len(COLOR_NAMES):
            parts.append(f"{value}={COLOR_NAMES[value - 1]} ({COLOR_LETTERS[value - 1]})")
        else:
            parts.append(str(value))
    if config.blanks_allowed:
        parts.append(f"{config.blank_peg}=blank ({BLANK_LETTER})")
    return ", ".join(parts)


def parse_guess(text: str, config: Configuration) -> list[int]:
    """
    Parse a guess typed by the player.

    Accepts integers separated by commas or spaces ("1,2,3,4" or "1 2 3 4"),
    or color letters ("WKRG", "W K R G"; "_" for a blank). When every legal
    peg is a single digit, an unseparated run such as "1234" is read one
    digit per peg.
    Length and peg legality are left to the session.

    Raises:
        InvalidGuessError: If the text cannot be read as a guess.
    """
    text = text.strip()
    if not text:
        raise InvalidGuessError("Empty guess")

    if re.search(r"\d", text):
        tokens = [x for x in re.split(r"[,\s]+", text) if x]
        if len(tokens) == 1 and tokens[0].isdigit() and len(config.legal_pegs) <= 9:
            tokens = list(tokens[0])
        try:
            return [int(x) for x in tokens]
        except ValueError:
            raise InvalidGuessError(f"Could not read {text!r} as numbers")

    if config.color_count > len(COLOR_LETTERS):
        raise InvalidGuessError("Use peg numbers with more than 8 colors")

    letters = {letter: i for i, letter in enumerate(COLOR_LETTERS[:config.color_count], 1)}
    if config.blanks_allowed:
        letters[BLANK_LETTER] = config.blank_peg

    guess = []
    for ch in re.sub(r"[,\s]+", "", text.upper()):
        if ch not in letters:
            raise InvalidGuessError(f"Unknown color letter {ch!r}")
        guess.append(letters[ch])
    return guess


def layout_clues(score: Score, hole_count: int, rng: Optional[random.Random] = None) -> list[str]:
    """
    Scatter the black and white clue indicators over the clue slots.

    Placement is random so the slots say nothing about which holes matched.
    This is display only; the score itself is untouched.
    """
    rng = rng if rng is not None else random.Random()
    slots = [EMPTY_CLUE] * hole_count
    indices = list(range(hole_count))
    rng.shuffle(indices)
    clues = [BLACK_CLUE] * score.exact_matches + [WHITE_CLUE] * score.color_matches
    for index, clue in zip(indices, clues):
        slots[index] = clue
    return slots


def render_board(session: GameSession, reveal: bool = False,
                 rng: Optional[random.Random] = None) -> str:
    """Render the secret row and all attempts as a text grid."""
    config = session.config
    headers = ["#"] + [f"H{i}" for i in range(1, config.hole_count + 1)] + ["Clues"]

    if reveal or session.is_game_over():
        secret_row = [peg_label(x, config) for x in session.reveal_secret()]
    else:
        secret_row = ["?"] * config.hole_count
    rows = [["Code"] + secret_row + [""]]

    for i, attempt in enumerate(session.history, 1):
        clues = "".join(layout_clues(attempt.score, config.hole_count, rng))
        rows.append([i] + [peg_label(x, config) for x in attempt.guess] + [clues])

    return tabulate(rows, headers=headers, tablefmt="grid")


class ConsolePlayer:
    """Player that reads guesses from the terminal."""

    def __init__(self, config: Configuration, reveal: bool = False,
                 input_fn: Optional[Callable[[str], str]] = None,
                 output_fn: Optional[Callable[[str], None]] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize console player.

        Args:
            config: Game configuration
            reveal: Show the secret row while playing (diagnostic mode)
            input_fn: Line reader, input() by default
            output_fn: Line writer, print() by default
            rng: Random source for clue placement
        """
        self.config = config
        self.reveal = reveal
        self.input_fn = input_fn if input_fn is not None else input
        self.output_fn = output_fn if output_fn is not None else print
        self.rng = rng if rng is not None else random.Random()

    def get_next_guess(self, session: GameSession) -> Optional[list[int]]:
        """Prompt until the player types a readable guess; None means quit."""
        if session.history or self.reveal:
            self.output_fn(render_board(session, self.reveal, self.rng))

        self.output_fn(
            f"Guess {session.current_attempt_index() + 1} of {self.config.guess_limit} "
            f"({self.config.hole_count} pegs)"
        )
        self.output_fn(f"Pegs: {describe_palette(self.config)}")

        while True:
            try:
                text = self.input_fn("Enter your guess (or 'quit'): ")
            except EOFError:
                return None

            if text.strip().lower() in ("quit", "exit"):
                return None

            try:
                return parse_guess(text, self.config)
            except InvalidGuessError as e:
                self.output_fn(f"Invalid input: {e}")

    def reject(self, message: str) -> None:
        self.output_fn(f"Invalid guess: {message}")

    def game_over(self, session: GameSession) -> None:
        self.output_fn(render_board(session, reveal=True, rng=self.rng))
        if session.won:
            self.output_fn(f"You win! Solved in {session.current_attempt_index()} guesses.")
        else:
            self.output_fn("You lose!")

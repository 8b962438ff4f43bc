"""
Per-player game session: typed letters, submitted guesses and win/loss state.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from game_logic import Classification, evaluate_guess, merge_key_state

logger = logging.getLogger(__name__)

BACKSPACE = "\x08"
ENTER = "\n"
SPACER = "|"

# On-screen keyboard, "|" is an empty half-key used for alignment
KEYBOARD_ROWS = ("QWERTYUIOP", "|ASDFGHJKL|", "\nZXCVBNM\x08")
KEY_LABELS = {ENTER: "↵", BACKSPACE: "⌫"}

# Names the browser uses for the special keys
KEY_ALIASES = {"Backspace": BACKSPACE, "Enter": ENTER}

WIN_MESSAGE = "Congratulations! A new wordle will be available tomorrow."
LOSS_MESSAGE = "Unlucky... try again tomorrow."


class GameState(str, Enum):
    CONTINUE = "continue"
    WON = "won"
    LOST = "lost"


@dataclass
class GuessLetter:
    letter: str
    state: Optional[Classification] = None


@dataclass
class Guess:
    letters: list = field(default_factory=list)

    @property
    def word(self) -> str:
        return "".join(l.letter for l in self.letters)

    @property
    def evaluated(self) -> bool:
        return bool(self.letters) and all(l.state is not None for l in self.letters)


def _state_name(state):
    return state.name.lower() if state is not None else None


class GameSession:
    """
    One play-through of the daily puzzle.

    The last entry in ``guesses`` is the active row the player is typing into;
    all earlier rows have been scored and never change again.
    """

    def __init__(self, dictionary, daily, max_guesses: int = 6, game_name: str = "Daily Wordle"):
        if daily.word not in dictionary:
            raise ValueError(f"Daily word {daily.word!r} is not in the dictionary")

        self.dictionary = dictionary
        self.daily = daily
        self.max_guesses = max_guesses
        self.game_name = game_name
        self.guesses = [Guess()]
        self.state = GameState.CONTINUE
        self.keyboard = {key: None for row in KEYBOARD_ROWS for key in row if key.isalpha()}
        self.modal_open = False
        self.shared = False

    @property
    def target(self) -> str:
        return self.daily.word

    @property
    def word_length(self) -> int:
        return self.dictionary.word_length

    @property
    def current_guess(self) -> Guess:
        return self.guesses[-1]

    @property
    def terminal(self) -> bool:
        return self.state != GameState.CONTINUE

    # --------------------
    # Input
    # --------------------
    def handle_key(self, symbol) -> bool:
        """
        Apply one key press. Returns True if the display needs a refresh.

        Accepts a letter, backspace ("\\x08" or "Backspace") or submit
        ("\\n" or "Enter"). Anything else is ignored.
        """
        if self.terminal or not isinstance(symbol, str):
            return False

        symbol = KEY_ALIASES.get(symbol, symbol)
        letters = self.current_guess.letters

        if symbol == BACKSPACE:
            if not letters:
                return False
            letters.pop()
            return True

        if symbol == ENTER:
            if len(letters) != self.word_length:
                return False
            self.guess()
            return True

        if len(symbol) == 1 and symbol.isascii() and symbol.isalpha():
            if len(letters) >= self.word_length:
                return False
            letters.append(GuessLetter(symbol.upper()))
            return True

        return False

    def guess(self) -> bool:
        """Score the active row. Returns False if it is not a dictionary word."""
        if self.terminal:
            return False

        guess = self.current_guess
        result = evaluate_guess(self.target, guess.word, self.dictionary)
        if result is None:
            logger.debug("Rejected %r, not in word list", guess.word)
            return False

        for letter, state in zip(guess.letters, result):
            letter.state = state
            if letter.letter in self.keyboard:
                self.keyboard[letter.letter] = merge_key_state(self.keyboard[letter.letter], state)

        if all(r == Classification.CORRECT for r in result):
            self.state = GameState.WON
            self.modal_open = True
        elif len(self.guesses) == self.max_guesses:
            self.state = GameState.LOST
            self.modal_open = True
        else:
            self.guesses.append(Guess())
        return True

    def close_modal(self) -> bool:
        self.modal_open = False
        return True

    # --------------------
    # Sharing
    # --------------------
    def share_text(self) -> str:
        score = str(len(self.guesses)) if self.state == GameState.WON else "X"
        lines = [f"{self.game_name} {self.daily.puzzle_number}  {score} / {self.max_guesses}"]
        for guess in self.guesses:
            if not guess.evaluated:
                continue
            lines.append("".join(l.state.emoji for l in guess.letters))
        return "\n".join(lines) + "\n"

    def share(self) -> str:
        self.shared = True
        return self.share_text()

    # --------------------
    # Rendering
    # --------------------
    def view(self) -> dict:
        """Everything the browser needs to draw the board, keyboard and overlay."""
        rows = []
        for idx in range(self.max_guesses):
            letters = self.guesses[idx].letters if idx < len(self.guesses) else []
            row = [{"letter": l.letter, "state": _state_name(l.state)} for l in letters]
            row += [{"letter": "", "state": None}] * (self.word_length - len(row))
            rows.append(row)

        keyboard = []
        for row in KEYBOARD_ROWS:
            keys = []
            for key in row:
                if key == SPACER:
                    keys.append({"key": key, "spacer": True})
                else:
                    keys.append({
                        "key": key,
                        "label": KEY_LABELS.get(key, key),
                        "state": _state_name(self.keyboard.get(key)),
                    })
            keyboard.append(keys)

        view = {
            "puzzle": self.daily.puzzle_number,
            "state": self.state.value,
            "word_length": self.word_length,
            "max_guesses": self.max_guesses,
            "guesses": rows,
            "keyboard": keyboard,
            "modal_open": self.modal_open,
            "shared": self.shared,
            "message": None,
            "word": None,
        }
        if self.terminal:
            view["message"] = WIN_MESSAGE if self.state == GameState.WON else LOSS_MESSAGE
            view["word"] = self.target.lower()
        return view

    # --------------------
    # Session storage
    # --------------------
    def to_dict(self) -> dict:
        return {
            "ordinal": self.daily.ordinal,
            "cycle": self.daily.cycle,
            "guesses": [guess.word for guess in self.guesses if guess.evaluated],
            "typing": "" if self.terminal else self.current_guess.word,
            "modal_open": self.modal_open,
            "shared": self.shared,
        }

    @classmethod
    def restore(cls, data, dictionary, daily, max_guesses: int = 6, game_name: str = "Daily Wordle"):
        """
        Rebuild a session from ``to_dict`` output by replaying its keystrokes.

        Data saved for a different puzzle gives a fresh game.
        """
        session = cls(dictionary, daily, max_guesses=max_guesses, game_name=game_name)
        if not data or (data.get("ordinal"), data.get("cycle")) != (daily.ordinal, daily.cycle):
            return session

        for word in data.get("guesses") or []:
            for letter in word:
                session.handle_key(letter)
            session.handle_key(ENTER)
        for letter in data.get("typing") or "":
            session.handle_key(letter)

        session.modal_open = bool(data.get("modal_open")) and session.terminal
        session.shared = bool(data.get("shared"))
        return session

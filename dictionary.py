"""
Word list loading and deterministic word-of-the-day selection.
"""
import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

logger = logging.getLogger(__name__)

DAY_BOUNDARIES = ("local", "utc")


class EmptyDictionaryError(ValueError):
    """Raised when no usable words are left after normalization."""


class ClockError(RuntimeError):
    """Raised when the current date cannot be determined."""


@dataclass(frozen=True)
class DailyWord:
    word: str
    ordinal: int
    cycle: int

    @property
    def puzzle_number(self) -> int:
        return self.ordinal + 1


@dataclass
class Dictionary:
    """All guessable words: uppercase, fixed length, deduplicated."""
    words: tuple
    word_length: int
    _lookup: frozenset = field(init=False, repr=False, compare=False)
    _daily_cache: dict = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self):
        self._lookup = frozenset(self.words)

    def __len__(self):
        return len(self.words)

    def __contains__(self, word):
        return isinstance(word, str) and word.upper() in self._lookup

    def shuffled(self, seed: int, cycle: int) -> list:
        """
        Order of the words for a given cycle.

        The same generator shuffles the working copy cycle + 1 times, so
        cycle N always continues from the state cycle N - 1 left behind.
        """
        order = list(self.words)
        rng = random.Random(seed)
        for _ in range(cycle + 1):
            rng.shuffle(order)
        return order

    def word_for_day(self, days_elapsed: int, seed: int) -> DailyWord:
        if days_elapsed < 0:
            raise ValueError(f"Day {days_elapsed} is before the first puzzle")

        key = (days_elapsed, seed)
        if key not in self._daily_cache:
            cycle, ordinal = divmod(days_elapsed, len(self.words))
            order = self.shuffled(seed, cycle)
            word = order[len(order) - 1 - ordinal]
            self._daily_cache[key] = DailyWord(word=word, ordinal=ordinal, cycle=cycle)
        return self._daily_cache[key]


def load_word_list(path: str) -> list:
    """Read a one-word-per-line file."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def build_dictionary(raw_words, word_length: int) -> Dictionary:
    """
    Normalize a raw word list into a Dictionary.

    Args:
        raw_words: Iterable of words in any case, possibly padded or duplicated
        word_length: Only ASCII-letter words of exactly this length are kept

    Returns:
        Dictionary sorted and deduplicated

    Raises:
        EmptyDictionaryError: if no word of the requested length survives
    """
    words = [word.strip().upper() for word in raw_words]
    # Uppercasing can change the length ("ß" becomes "SS"), so filter afterwards
    words = [word for word in words if len(word) == word_length and word.isascii() and word.isalpha()]
    logger.info("%d total words in dictionary", len(words))

    # Dedup needs equal words next to each other, so sort first
    words.sort()
    deduped = [word for i, word in enumerate(words) if i == 0 or words[i - 1] != word]

    if not deduped:
        raise EmptyDictionaryError(f"No {word_length}-letter words found, cannot pick a daily word")

    return Dictionary(words=tuple(deduped), word_length=word_length)


def days_between(epoch_date: date, today: date) -> int:
    return (today - epoch_date).days


def select_daily_word(dictionary: Dictionary, seed: int, today: date, epoch_date: date) -> DailyWord:
    """
    Pick the word of the day.

    Every day maps to one word, no word repeats inside a cycle, and each new
    cycle reshuffles the dictionary. Only the date is needed to reproduce it.
    """
    daily = dictionary.word_for_day(days_between(epoch_date, today), seed)
    logger.debug("Today is puzzle %d (cycle %d)", daily.ordinal, daily.cycle)
    return daily


def current_date(day_boundary: str = "local", clock=None) -> date:
    """
    Today's calendar date under the given day-boundary policy.

    "local" rolls over at local midnight of the server process, "utc" at
    midnight UTC. ``clock`` takes a tzinfo (or None) and returns a datetime.
    """
    if day_boundary not in DAY_BOUNDARIES:
        raise ValueError(f"Unknown day boundary {day_boundary!r}, expected one of {DAY_BOUNDARIES}")

    clock = clock or datetime.now
    tz = timezone.utc if day_boundary == "utc" else None
    try:
        now = clock(tz)
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError(f"Could not read the current time: {e}") from e

    if not isinstance(now, datetime):
        raise ClockError(f"Clock returned {now!r} instead of a datetime")
    return now.date()

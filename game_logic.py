from enum import IntEnum


# Ordered so a key's colour can only move up: Incorrect < WrongPlace < Correct
class Classification(IntEnum):
    INCORRECT = 0
    WRONG_PLACE = 1
    CORRECT = 2

    @property
    def emoji(self) -> str:
        return EMOJI[self]


EMOJI = {
    Classification.CORRECT: "\U0001F7E9",      # green square
    Classification.WRONG_PLACE: "\U0001F7E8",  # yellow square
    Classification.INCORRECT: "\u2B1B",       # black square
}


# Check if a word is in the dictionary, ignoring case.
def is_valid_word(word: str, dictionary) -> bool:
    return word.upper() in dictionary


# Evaluate a guess against the target word. Returns None for non-words.
def evaluate_guess(target: str, guess: str, dictionary):
    target = target.upper()
    guess = guess.upper()
    if len(guess) != len(target) or not is_valid_word(guess, dictionary):
        return None

    result = [Classification.INCORRECT] * len(target)

# First pass: mark correct positions and count the target letters they did not use up
    remaining = {}
    for i, (s, g) in enumerate(zip(target, guess)):
        if g == s:
            result[i] = Classification.CORRECT
        else:
            remaining[s] = remaining.get(s, 0) + 1

# Second pass: each leftover target letter can turn at most one guess letter yellow
    for i, g in enumerate(guess):
        if result[i] == Classification.CORRECT:
            continue
        if remaining.get(g, 0) > 0:
            result[i] = Classification.WRONG_PLACE
            remaining[g] -= 1

    return result


# Best-known state for a key; None means the letter has not been played yet.
def merge_key_state(existing, candidate):
    if existing is None:
        return candidate
    return max(existing, candidate)

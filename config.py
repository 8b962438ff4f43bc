"""
Runtime configuration for the daily Wordle server.

Every value can be set from the environment (or a .env file).
"""
import os
from datetime import date
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Seed and epoch together fix the whole history of daily words
DEFAULT_SEED = 11530789889988543623
DEFAULT_EPOCH = "2025-02-10"


def _parse_date(value):
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


def load_config(overrides=None) -> dict:
    """
    Build the app configuration from the environment.

    Args:
        overrides: Optional mapping applied on top of the environment values

    Returns:
        Dict of Flask config keys
    """
    config = {
        "SECRET_KEY": os.environ.get("SECRET_KEY", "dev-secret-change-in-production"),
        "REDIS_URL": os.environ.get("REDIS_URL"),
        "WORDS_FILE": os.environ.get("WORDS_FILE", os.path.join(BASE_DIR, "data", "valid_words.txt")),
        "WORD_LENGTH": int(os.environ.get("WORD_LENGTH", 6)),
        "MAX_GUESSES": int(os.environ.get("MAX_GUESSES", 6)),
        "WORDLE_SEED": int(os.environ.get("WORDLE_SEED", DEFAULT_SEED)),
        "EPOCH_DATE": os.environ.get("EPOCH_DATE", DEFAULT_EPOCH),
        "DAY_BOUNDARY": os.environ.get("DAY_BOUNDARY", "local"),
        "GAME_NAME": os.environ.get("GAME_NAME", "Daily Wordle"),
        "WORDLE_TODAY": os.environ.get("WORDLE_TODAY"),
    }
    if overrides:
        config.update(overrides)

    config["EPOCH_DATE"] = _parse_date(config["EPOCH_DATE"])
    config["WORDLE_TODAY"] = _parse_date(config["WORDLE_TODAY"])
    return config

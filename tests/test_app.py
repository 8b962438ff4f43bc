from datetime import date

import pytest

from app import create_app, socketio
from dictionary import EmptyDictionaryError, build_dictionary, select_daily_word

WORDS = ["bonus", "raise", "souls", "steep", "sleek", "drool", "crane", "plumb", "fight", "windy", "jumpy"]
SEED = 42
EPOCH = date(2025, 2, 10)
TODAY = date(2025, 3, 1)


def make_app(**overrides):
    config = {
        "TESTING": True,
        "SECRET_KEY": "test",
        "REDIS_URL": None,
        "WORDS": WORDS,
        "WORD_LENGTH": 5,
        "MAX_GUESSES": 6,
        "WORDLE_SEED": SEED,
        "EPOCH_DATE": EPOCH,
        "WORDLE_TODAY": TODAY,
        "GAME_NAME": "Test Wordle",
    }
    config.update(overrides)
    return create_app(config)


def todays_word() -> str:
    return select_daily_word(build_dictionary(WORDS, 5), SEED, TODAY, EPOCH).word


def wrong_word() -> str:
    return next(w for w in WORDS if w.upper() != todays_word())


def press(client, key):
    return client.post("/api/key", json={"key": key})


def test_index():
    client = make_app().test_client()
    response = client.get("/")
    assert response.status_code == 200
    assert b"Test Wordle" in response.data


def test_state():
    client = make_app().test_client()
    data = client.get("/api/state").get_json()

    assert data["state"] == "continue"
    assert data["puzzle"] == (TODAY - EPOCH).days % len(WORDS) + 1
    assert data["word"] is None


def test_keys_persist_across_requests():
    client = make_app().test_client()
    guess = wrong_word()

    for letter in guess:
        assert press(client, letter).get_json()["refresh"]
    data = press(client, "Enter").get_json()

    assert data["refresh"]
    assert "".join(l["letter"] for l in data["guesses"][0]) == guess.upper()
    assert all(l["state"] is not None for l in data["guesses"][0])

    data = client.get("/api/state").get_json()
    assert "".join(l["letter"] for l in data["guesses"][0]) == guess.upper()


def test_win_close_and_share():
    client = make_app().test_client()
    for letter in todays_word():
        press(client, letter)
    data = press(client, "Enter").get_json()

    assert data["state"] == "won"
    assert data["modal_open"]
    assert data["word"] == todays_word().lower()

    assert not press(client, "a").get_json()["refresh"]

    data = client.post("/api/close").get_json()
    assert not data["modal_open"]

    data = client.post("/api/share").get_json()
    puzzle = (TODAY - EPOCH).days % len(WORDS) + 1
    assert data["text"] == f"Test Wordle {puzzle}  1 / 6\n" + "\U0001F7E9" * 5 + "\n"
    assert data["shared"]


def test_bad_key_payload():
    client = make_app().test_client()
    assert client.post("/api/key", json={}).status_code == 400
    assert client.post("/api/key", json={"key": 5}).status_code == 400
    assert client.post("/api/key", data="nope").status_code == 400


def test_empty_dictionary_is_fatal():
    with pytest.raises(EmptyDictionaryError):
        make_app(WORDS=["cat", "dog"])


def test_before_epoch_is_fatal():
    with pytest.raises(ValueError):
        make_app(WORDLE_TODAY=date(2025, 1, 1))


def test_socket_events():
    app = make_app()
    client = socketio.test_client(app)
    assert client.is_connected()

    received = client.get_received()
    assert received[0]["name"] == "state"
    assert received[0]["args"][0]["state"] == "continue"

    for letter in todays_word():
        client.emit("key", {"key": letter})
    client.emit("key", {"key": "Enter"})
    states = [r["args"][0] for r in client.get_received() if r["name"] == "state"]
    assert len(states) == len(todays_word()) + 1
    assert states[-1]["state"] == "won"

    client.emit("close_modal")
    assert not client.get_received()[-1]["args"][0]["modal_open"]

    client.emit("share")
    received = client.get_received()
    shared = [r for r in received if r["name"] == "shared"]
    assert shared[0]["args"][0]["text"].endswith("\U0001F7E9" * 5 + "\n")

    client.emit("key", {"key": 7})
    assert client.get_received()[0]["name"] == "key_error"

    client.disconnect()


def test_socket_game_is_separate_from_cookie_session():
    app = make_app()
    http = app.test_client()
    guess = wrong_word()
    for letter in guess:
        press(http, letter)

    client = socketio.test_client(app, flask_test_client=http)
    typed = client.get_received()[0]["args"][0]["guesses"][0]
    assert "".join(l["letter"] for l in typed) == guess.upper()

    for letter in todays_word():
        client.emit("key", {"key": "Backspace"})
    for letter in todays_word():
        client.emit("key", {"key": letter})
    client.emit("key", {"key": "Enter"})
    assert client.get_received()[-1]["args"][0]["state"] == "won"

    data = http.get("/api/state").get_json()
    assert data["state"] == "continue"
    assert "".join(l["letter"] for l in data["guesses"][0]) == guess.upper()

    client.disconnect()

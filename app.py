import os
import logging
from flask import Blueprint, Flask, current_app, jsonify, render_template, request, session
from flask_session import Session
from flask_socketio import SocketIO, emit
import redis

from config import load_config
from dictionary import build_dictionary, current_date, load_word_list, select_daily_word
from game import GameSession

SESSION_KEY = "game"

bp = Blueprint("wordle", __name__)
socketio = SocketIO()


# Flask app setup
def create_app(overrides=None):
    """
    Factory function to create and configure Flask app.

    Loads the word list and checks today's word can be picked, so a missing
    dictionary or a broken clock stops the server before it takes requests.
    """
    app = Flask(__name__)
    app.config.update(load_config(overrides))

    # Redis-backed server-side sessions, signed cookies otherwise
    redis_url = app.config.get("REDIS_URL")
    if redis_url:
        app.config["SESSION_TYPE"] = "redis"
        app.config["SESSION_REDIS"] = redis.from_url(redis_url)
        app.config["SESSION_PERMANENT"] = False
        app.config["SESSION_USE_SIGNER"] = True
        Session(app)

    words = app.config.get("WORDS")
    if words is None:
        words = load_word_list(app.config["WORDS_FILE"])
    dictionary = build_dictionary(words, app.config["WORD_LENGTH"])
    app.extensions["wordle_dictionary"] = dictionary

    app.register_blueprint(bp)

    # SocketIO with Redis message queue for multi-process scaling
    socketio.init_app(app, cors_allowed_origins="*", message_queue=redis_url)

    with app.app_context():
        daily = todays_puzzle()
    app.logger.info("Loaded %d words, today is puzzle %d (cycle %d)",
                    len(dictionary), daily.ordinal, daily.cycle)
    return app


def todays_puzzle():
    config = current_app.config
    today = config["WORDLE_TODAY"] or current_date(config["DAY_BOUNDARY"])
    return select_daily_word(
        current_app.extensions["wordle_dictionary"],
        config["WORDLE_SEED"],
        today,
        config["EPOCH_DATE"],
    )


def load_game() -> GameSession:
    """Current player's game, rebuilt from their session."""
    return GameSession.restore(
        session.get(SESSION_KEY),
        current_app.extensions["wordle_dictionary"],
        todays_puzzle(),
        max_guesses=current_app.config["MAX_GUESSES"],
        game_name=current_app.config["GAME_NAME"],
    )


def save_game(game: GameSession):
    session[SESSION_KEY] = game.to_dict()


# --------------------
# Basic routes
# --------------------
@bp.route("/")
def index():
    """Serve the main single-page app."""
    return render_template("index.html", game_name=current_app.config["GAME_NAME"])


@bp.route("/api/state")
def get_state():
    """Board, keyboard and overlay for the current player."""
    return jsonify(load_game().view())


@bp.route("/api/key", methods=["POST"])
def press_key():
    """Apply one key press: a letter, Backspace or Enter."""
    data = request.get_json(silent=True) or {}
    key = data.get("key")

    if not isinstance(key, str) or not key:
        return jsonify({"error": "Key required"}), 400

    game = load_game()
    refresh = game.handle_key(key)
    save_game(game)
    return jsonify({"refresh": refresh, **game.view()})


@bp.route("/api/close", methods=["POST"])
def close_modal():
    """Hide the end-of-game overlay."""
    game = load_game()
    game.close_modal()
    save_game(game)
    return jsonify(game.view())


@bp.route("/api/share", methods=["POST"])
def share():
    """Emoji summary of the game for the clipboard or share sheet."""
    game = load_game()
    text = game.share()
    save_game(game)
    return jsonify({"text": text, **game.view()})


# --------------------
# Socket events
# --------------------
# Each connection starts from a copy of the HTTP session and keeps its own
# game from then on. With cookie sessions, moves made over the socket are
# not seen by /api/state; the page should use one channel or the other.
@socketio.on("connect")
def on_connect():
    """Send the board as soon as the page connects."""
    emit("state", load_game().view())


@socketio.on("key")
def on_key(data):
    """Process one keystroke from the page."""
    key = data.get("key") if isinstance(data, dict) else data
    if not isinstance(key, str) or not key:
        emit("key_error", {"error": "Key required"})
        return

    game = load_game()
    if game.handle_key(key):
        save_game(game)
        emit("state", game.view())


@socketio.on("close_modal")
def on_close_modal():
    game = load_game()
    game.close_modal()
    save_game(game)
    emit("state", game.view())


@socketio.on("share")
def on_share():
    game = load_game()
    text = game.share()
    save_game(game)
    emit("shared", {"text": text})
    emit("state", game.view())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    print(f"{app.config['GAME_NAME']} ready")
    port = int(os.environ.get("PORT", 5000))
    socketio.run(app, host="0.0.0.0", port=port, debug=True, allow_unsafe_werkzeug=True)

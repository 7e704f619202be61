"""
Flask server for the keypad-calc web UI.

Serves the calculator page and a small JSON API that applies button clicks
and keystrokes to the caller's calculator session.
"""

import logging
import os
import secrets

from flask import Flask, jsonify, render_template, request, session

from ..keys import ACTIONS, CLEAR_ALL, CLEAR_HISTORY
from ..session import CalculatorSession, UnknownActionError, get_or_create_session

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Configuration
app.secret_key = os.environ.get("KEYPAD_CALC_SECRET_KEY") or secrets.token_hex(32)

_SESSION_KEY = "calculator_id"


def _current_session() -> CalculatorSession:
    """Return the calculator session bound to this browser's cookie."""
    calc = get_or_create_session(session.get(_SESSION_KEY))
    session[_SESSION_KEY] = calc.session_id
    return calc


@app.route("/")
def index():
    """Render the calculator page."""
    calc = _current_session()
    return render_template("index.html", state=calc.snapshot())


@app.route("/api/state", methods=["GET"])
def get_state():
    """
    Get the current calculator state.

    Returns:
        {
            "display": "1,234",
            "raw_display": "1234",
            "expression": "7 +",
            "history": ["7 + 3 = 10"],
            "show_history": false,
            "waiting_for_operand": false
        }
    """
    return jsonify(_current_session().snapshot())


@app.route("/api/press", methods=["POST"])
def press():
    """
    Apply a button press.

    Expected JSON payload:
        {
            "action": "digit|decimal|operator|equals|clear|clear_all|backspace|percentage|toggle_sign|clear_history|toggle_history",
            "value": "..."  // digit or operator, depending on action
        }

    Returns:
        JSON snapshot of the calculator state
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not data:
        return jsonify({"error": "No data provided"}), 400

    action = data.get("action", "")
    if action not in ACTIONS:
        logger.warning("Rejected unknown action %r", action)
        return jsonify({"error": f"Unknown action: {action}"}), 400

    value = data.get("value")
    if value is not None:
        value = str(value)

    try:
        state = _current_session().press(action, value)
    except UnknownActionError as e:
        logger.warning("Rejected %s press: %s", action, e)
        return jsonify({"error": str(e)}), 400

    return jsonify(state)


@app.route("/api/key", methods=["POST"])
def key():
    """
    Apply a keyboard key.

    Expected JSON payload:
        {"key": "7"}  // browser key name: digits, + - * /, ., Enter, =, Escape, Backspace, %

    Returns:
        JSON snapshot, with "ignored": true when the key has no meaning here
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("key"), str):
        return jsonify({"error": "key is required"}), 400

    calc = _current_session()
    state = calc.press_key(data["key"])
    if state is None:
        return jsonify({**calc.snapshot(), "ignored": True})

    return jsonify({**state, "ignored": False})


@app.route("/api/history/toggle", methods=["POST"])
def toggle_history():
    """Show or hide the history panel."""
    return jsonify(_current_session().toggle_history())


@app.route("/api/history/clear", methods=["POST"])
def clear_history():
    """Empty the history, leaving the current entry alone."""
    return jsonify(_current_session().press(CLEAR_HISTORY))


@app.route("/api/reset", methods=["POST"])
def reset():
    """Reset the calculator, history included."""
    return jsonify(_current_session().press(CLEAR_ALL))


def main():
    """Run the Flask development server."""
    import argparse

    parser = argparse.ArgumentParser(description="Run the keypad-calc web server")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=5000,
        help="Port to bind to (default: 5000)",
    )

    args = parser.parse_args()
    serve(args.host, args.port)


def serve(host: str, port: int):
    """Configure logging and start the development server."""
    logging.basicConfig(
        level=os.environ.get("KEYPAD_CALC_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting keypad-calc web server at http://%s:%s", host, port)

    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    main()

"""CLI interface for keypad-calc."""

import json
import logging
import os
from typing import Iterable, List, Optional, Tuple

import click

from .keys import CLEAR_ALL, CLEAR_HISTORY, TOGGLE_SIGN, classify_key
from .session import CalculatorSession, Snapshot

# Multi-character key names kept whole when splitting a key sequence
NAMED_KEYS = {"Enter", "Escape", "Backspace"}

# Command-line spellings for buttons that have no keyboard key
ALIASES = {
    "AC": (CLEAR_ALL, None),
    "neg": (TOGGLE_SIGN, None),
    "±": (TOGGLE_SIGN, None),
}


def split_keys(tokens: Iterable[str]) -> List[str]:
    """
    Break command-line tokens into individual key names.

    "7+3=" becomes ["7", "+", "3", "="]; named keys such as "Enter" and
    aliases such as "AC" stay whole.
    """
    keys: List[str] = []
    for token in tokens:
        if token in NAMED_KEYS or token in ALIASES:
            keys.append(token)
        else:
            keys.extend(ch for ch in token if not ch.isspace())
    return keys


def resolve_key(key: str) -> Optional[Tuple[str, Optional[str]]]:
    if key in ALIASES:
        return ALIASES[key]
    return classify_key(key)


def run_keys(calc: CalculatorSession, keys: Iterable[str]) -> Snapshot:
    """
    Feed keys to a session in order and return the final snapshot.

    Every key is resolved before the first press, so a sequence with an
    unsupported key leaves the session untouched.

    Raises:
        click.BadParameter: If any key is unsupported
    """
    presses = []
    for key in keys:
        resolved = resolve_key(key)
        if resolved is None:
            raise click.BadParameter(f"Unsupported key: {key!r}", param_hint="KEYS")
        presses.append(resolved)

    state = calc.snapshot()
    for action, value in presses:
        state = calc.press(action, value)
    return state


def echo_history(history: List[str]) -> None:
    if not history:
        click.echo("No calculations yet")
        return
    for calculation in history:
        click.echo(calculation)


@click.group()
@click.option("--log-level", default=lambda: os.environ.get("KEYPAD_CALC_LOG_LEVEL", "WARNING"),
              show_default="WARNING", help="Logging level")
def main(log_level: str) -> None:
    """Pocket calculator with history, driven by key sequences."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@main.command("eval")
@click.argument("keys", nargs=-1, required=True)
@click.option("--history", "show_history", is_flag=True, default=False, help="Also print history")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full state as JSON")
def eval_keys(keys: Tuple[str, ...], show_history: bool, as_json: bool) -> None:
    """Press KEYS in order and print the display, e.g. `keypad-calc eval 7+3=`."""
    state = run_keys(CalculatorSession(), split_keys(keys))
    if as_json:
        click.echo(json.dumps(state, ensure_ascii=False))
        return
    click.echo(state["display"])
    if show_history:
        echo_history(state["history"])


@main.command()
def repl() -> None:
    """Interactive calculator; each line is a key sequence."""
    calc = CalculatorSession()
    click.echo("Type keys (7+3=), or :history, :clear-history, :ac, :quit")
    while True:
        try:
            line = click.prompt(calc.snapshot()["display"], default="", show_default=False)
        except (EOFError, click.Abort):
            click.echo()
            break

        command = line.strip()
        if command in (":quit", ":q"):
            break
        if command == ":history":
            echo_history(calc.snapshot()["history"])
            continue
        if command == ":clear-history":
            calc.press(CLEAR_HISTORY)
            continue
        if command == ":ac":
            calc.press(CLEAR_ALL)
            continue

        try:
            run_keys(calc, split_keys(command.split()))
        except click.BadParameter as e:
            click.echo(f"Error: {e.format_message()}", err=True)


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Host to bind to")
@click.option("--port", default=5000, show_default=True, type=int, help="Port to bind to")
def serve(host: str, port: int) -> None:
    """Run the web calculator."""
    from .webapp.server import serve as serve_app

    serve_app(host, port)


if __name__ == "__main__":  # pragma: no cover
    main()

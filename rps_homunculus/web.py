"""Flask JSON API for playing against the computer.

Matches live in process memory only and disappear when the server stops.
Finished matches stay readable until ``MAX_FINISHED`` newer ones have ended.
"""

from collections import OrderedDict
import os
import threading
import uuid

from flask import Flask, jsonify, request

from .algorithms import get_opponent
from .engine import RULESETS, MatchOverError, get_ruleset
from .game import DEFAULT_MAX_SCORE, Match

app = Flask(__name__)

MAX_FINISHED = int(os.environ.get("RPS_MAX_FINISHED", "256"))

_matches: dict[str, Match] = {}
_finished: "OrderedDict[str, None]" = OrderedDict()
_lock = threading.Lock()


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _match_state(match_id: str, match: Match) -> dict:
    state = match.to_dict()
    state["id"] = match_id
    return state


def _json_object():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def _retire(match_id: str):
    """Mark a match finished and evict the oldest finished ones. Hold ``_lock``."""
    _finished[match_id] = None
    while len(_finished) > MAX_FINISHED:
        old_id, _ = _finished.popitem(last=False)
        _matches.pop(old_id, None)


@app.route("/api/rulesets")
def api_rulesets():
    return jsonify({name: rules.values for name, rules in RULESETS.items()})


@app.route("/api/matches", methods=["POST"])
def api_new_match():
    data = _json_object()
    if data is None:
        return _error("Request body must be a JSON object", 400)
    try:
        rules = get_ruleset(data.get("rules", "classic"))
        opponent = get_opponent(data.get("opponent", "homunculus"), rules)
        match = Match(
            rules=rules,
            max_score=data.get("max_score", DEFAULT_MAX_SCORE),
            opponent=opponent,
            seed=data.get("seed"),
        )
    except (ValueError, TypeError, AttributeError) as e:
        return _error(f"Bad match settings: {e}", 400)

    match_id = uuid.uuid4().hex
    with _lock:
        _matches[match_id] = match
    return jsonify(_match_state(match_id, match)), 201


@app.route("/api/matches/<match_id>")
def api_get_match(match_id):
    with _lock:
        match = _matches.get(match_id)
        if match is None:
            return _error(f"Unknown match: {match_id}", 404)
        return jsonify(_match_state(match_id, match))


@app.route("/api/matches/<match_id>", methods=["DELETE"])
def api_delete_match(match_id):
    with _lock:
        if _matches.pop(match_id, None) is None:
            return _error(f"Unknown match: {match_id}", 404)
        _finished.pop(match_id, None)
    return "", 204


@app.route("/api/matches/<match_id>/rounds", methods=["POST"])
def api_play_round(match_id):
    data = _json_object()
    if data is None:
        return _error("Request body must be a JSON object", 400)
    with _lock:
        match = _matches.get(match_id)
        if match is None:
            return _error(f"Unknown match: {match_id}", 404)
        if match.is_over:
            return _error("The match is over", 409)
        try:
            human_move = match.rules.parse(str(data.get("move", "")).strip().lower())
        except ValueError as e:
            return _error(str(e), 400)

        computer_move = match.choose_computer_move()
        try:
            rnd = match.play_round(human_move, computer_move)
        except MatchOverError as e:
            return _error(str(e), 409)

        payload = _match_state(match_id, match)
        payload["round"] = rnd.to_dict()
        if match.is_over:
            _retire(match_id)
        return jsonify(payload)


@app.route("/api/matches/<match_id>/resign", methods=["POST"])
def api_resign(match_id):
    with _lock:
        match = _matches.get(match_id)
        if match is None:
            return _error(f"Unknown match: {match_id}", 404)
        match.resign()
        _retire(match_id)
        return jsonify(_match_state(match_id, match))


def main():
    host = os.environ.get("RPS_HOST", "127.0.0.1")
    port = int(os.environ.get("RPS_PORT", "5000"))
    print("\n🎮 RPS Homunculus API")
    print(f"  → http://{host}:{port}/api/rulesets\n")
    app.run(host=host, port=port)


if __name__ == "__main__":
    main()

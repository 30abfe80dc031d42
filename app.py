"""Drinkosaur BAC Flask API.

Every simulation request carries the profile and the drink log; nothing is
stored server-side.

Run from project root:
    python app.py
"""

import logging
import os
from typing import Any

from flask import Flask, jsonify, request

from drinkosaur.calculations import bac_trend
from drinkosaur.catalog import build_drink, list_all_flat, list_by_type, list_mixers, parsed_drink_from_dict
from drinkosaur.display import UNITS, dashboard_summary
from drinkosaur.drinks import DrinkEvent, InvalidDrinkError, list_drink_types, now_ms, parse_timestamp_ms
from drinkosaur.logging_setup import configure_logging
from drinkosaur.profile import UserProfile
from drinkosaur.status import calculate_status

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.json.ensure_ascii = False

MIN_VOLUME_ML = 1.0
MAX_VOLUME_ML = 5000.0
DEFAULT_MAX_DRINKS = 500


def _max_drinks() -> int:
    try:
        return max(1, int(os.environ.get("MAX_DRINKS_PER_REQUEST", DEFAULT_MAX_DRINKS)))
    except ValueError:
        return DEFAULT_MAX_DRINKS


def _parse_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y"}:
            return True
        if lowered in {"false", "0", "no", "n"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _clamp_float(value: Any, default: float, min_value: float, max_value: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = default
    return max(min_value, min(max_value, parsed))


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def _simulation_inputs(data: dict[str, Any]) -> tuple[list[DrinkEvent], UserProfile]:
    """Profile and drinks from a request body; raises ValueError on bad input."""
    profile = UserProfile.from_dict(data.get("profile"), strict=True)
    raw_drinks = data.get("drinks", [])
    if not isinstance(raw_drinks, list):
        raise InvalidDrinkError("drinks must be a list")
    if len(raw_drinks) > _max_drinks():
        raise InvalidDrinkError(f"At most {_max_drinks()} drinks per request")
    return [DrinkEvent.from_dict(raw) for raw in raw_drinks], profile


def _request_time(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return now_ms()
    return parse_timestamp_ms(value)


@app.errorhandler(ValueError)
def handle_value_error(exc: ValueError):
    logger.info("Rejected %s %s: %s", request.method, request.path, exc)
    return _error(str(exc))


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/drink-types")
def api_drink_types():
    return jsonify({"drink_types": list_drink_types()})


@app.route("/api/catalog")
def api_catalog():
    return jsonify({"by_type": list_by_type(), "flat": list_all_flat(), "mixers": list_mixers()})


@app.route("/api/drink", methods=["POST"])
def api_drink():
    data = request.get_json(silent=True) or {}
    reference_id = str(data.get("reference_id", "")).strip()
    if not reference_id:
        return _error("reference_id is required")
    try:
        volume = float(data.get("volume_ml"))
    except (TypeError, ValueError):
        return _error("volume_ml must be a number")
    if volume <= 0:
        return _error("Drink volume must be greater than 0 ml")
    volume = _clamp_float(volume, MIN_VOLUME_ML, MIN_VOLUME_ML, MAX_VOLUME_ML)
    mixer_id = str(data.get("mixer_id") or "").strip() or None
    mixer_ml = _clamp_float(data.get("mixer_ml"), 0.0, 0.0, MAX_VOLUME_ML)

    drink = build_drink(
        reference_id,
        volume,
        timestamp=data.get("timestamp"),
        is_chug=_parse_bool(data.get("is_chug"), default=False),
        mixer_id=mixer_id,
        mixer_ml=mixer_ml,
    )
    return jsonify({"ok": True, "drink": drink.to_dict()})


@app.route("/api/drink/parsed", methods=["POST"])
def api_drink_parsed():
    """Accept the free-text parser's output and turn it into a drink record."""
    data = request.get_json(silent=True) or {}
    parsed = parsed_drink_from_dict(data.get("parsed"))
    drink = parsed.to_drink_event(
        timestamp=data.get("timestamp"),
        is_chug=_parse_bool(data.get("is_chug"), default=False),
    )
    return jsonify({"ok": True, "drink": drink.to_dict()})


@app.route("/api/status", methods=["POST"])
def api_status():
    data = request.get_json(silent=True) or {}
    drinks, profile = _simulation_inputs(data)
    status = calculate_status(drinks, profile, now=_request_time(data, "now"))
    return jsonify(status.to_dict())


@app.route("/api/trend", methods=["POST"])
def api_trend():
    data = request.get_json(silent=True) or {}
    drinks, profile = _simulation_inputs(data)
    center = _request_time(data, "center_time")
    points = bac_trend(drinks, profile, center)
    return jsonify({
        "center_time": center,
        "points": [{"time": p.time, "bac": round(p.bac, 4)} for p in points],
    })


@app.route("/api/dashboard", methods=["POST"])
def api_dashboard():
    data = request.get_json(silent=True) or {}
    drinks, profile = _simulation_inputs(data)
    unit = str(data.get("unit") or "percent")
    if unit not in UNITS:
        return _error("unit must be percent or g/L")
    status = calculate_status(drinks, profile, now=_request_time(data, "now"))
    return jsonify({
        "configured": profile.is_setup,
        "drink_count": len(drinks),
        "status": status.to_dict(),
        "dashboard": dashboard_summary(status, unit=unit),
    })


if __name__ == "__main__":
    configure_logging()
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")

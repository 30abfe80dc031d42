"""Drink events and consumption-rate helpers for BAC tracking.

Volumes are in millilitres, ABV is a percentage (5.0 for 5%) and timestamps
are milliseconds since the epoch marking the start of consumption.
"""

import math
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Ethanol density (g/mL) for volume x ABV -> grams.
ETHANOL_DENSITY = 0.789

DRINK_TYPES = ("beer", "wine", "cocktail", "spirit", "other")
DRINKING_SPEEDS = ("slow", "average", "fast")

# Consumption speeds in ml/minute, per drink type and drinking speed.
CONSUMPTION_RATES: Dict[str, Dict[str, float]] = {
    "beer": {"slow": 17, "average": 21, "fast": 25},  # 250 ml ~12 min average
    "wine": {"slow": 6, "average": 7, "fast": 8},  # 125 ml ~18 min average
    "cocktail": {"slow": 5, "average": 7.5, "fast": 10},
    "spirit": {"slow": 10, "average": 20, "fast": 40},
    "other": {"slow": 10, "average": 15, "fast": 20},
}

DRINK_TYPE_NAMES = {
    "beer": "Beer",
    "wine": "Wine",
    "cocktail": "Cocktail",
    "spirit": "Spirit",
    "other": "Other",
}


class InvalidDrinkError(ValueError):
    """Raised by the entry layer for drink records the tracker cannot accept."""


@dataclass(frozen=True)
class DrinkEvent:
    """A single logged drink."""

    id: str
    name: str
    volume_ml: float  # total poured volume, mixer included
    abv: float  # effective ABV of the combined liquid, 0-100
    timestamp: int  # ms since epoch, start of consumption
    is_chug: bool = False
    type: str = "other"
    icon: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return (
            math.isfinite(self.volume_ml)
            and math.isfinite(self.abv)
            and self.volume_ml > 0
            and 0 <= self.abv <= 100
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "volumeMl": self.volume_ml,
            "abv": self.abv,
            "timestamp": self.timestamp,
            "isChug": self.is_chug,
            "type": self.type,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "DrinkEvent":
        """Build from the JSON drink contract (camelCase keys).

        Raises InvalidDrinkError when the record should never have left the
        entry flow.
        """
        if not isinstance(raw, dict):
            raise InvalidDrinkError("Drink must be an object")
        try:
            volume_ml = float(raw.get("volumeMl", raw.get("volume_ml")))
            abv = float(raw.get("abv"))
        except (TypeError, ValueError):
            raise InvalidDrinkError("Drink volumeMl and abv must be numbers")
        timestamp = parse_timestamp_ms(raw.get("timestamp"))
        drink_type = str(raw.get("type") or "other").strip().lower()
        is_chug = raw.get("isChug", raw.get("is_chug", False))
        drink = cls(
            id=str(raw.get("id") or ""),
            name=str(raw.get("name") or "Drink"),
            volume_ml=volume_ml,
            abv=abv,
            timestamp=timestamp,
            is_chug=is_chug is True or str(is_chug).lower() in {"true", "1", "yes"},
            type=drink_type if drink_type in DRINK_TYPES else "other",
            icon=raw.get("icon"),
        )
        validate_drink(drink)
        return drink


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_timestamp_ms(value: Any) -> int:
    """Timestamp in ms since epoch; missing means now."""
    if value is None or value == "":
        return now_ms()
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise InvalidDrinkError("Drink timestamp must be milliseconds since epoch")
    if not math.isfinite(parsed) or parsed < 0:
        raise InvalidDrinkError("Drink timestamp must be milliseconds since epoch")
    return int(parsed)


def validate_drink(drink: DrinkEvent) -> None:
    if not math.isfinite(drink.volume_ml) or drink.volume_ml <= 0:
        raise InvalidDrinkError("Drink volume must be greater than 0 ml")
    if not math.isfinite(drink.abv) or drink.abv < 0 or drink.abv > 100:
        raise InvalidDrinkError("Drink ABV must be between 0 and 100")


def alcohol_grams(volume_ml: float, abv: float) -> float:
    """Grams of ethanol in volume_ml of liquid at abv percent."""
    return volume_ml * (abv / 100.0) * ETHANOL_DENSITY


def consumption_rate_ml_per_min(drink_type: Optional[str], drinking_speed: str = "average") -> float:
    rates = CONSUMPTION_RATES.get(drink_type or "other", CONSUMPTION_RATES["other"])
    return rates.get(drinking_speed, rates["average"])


def consumption_duration_ms(drink: DrinkEvent, drinking_speed: str = "average") -> float:
    """How long the drink takes to finish; zero for a chug."""
    if drink.is_chug:
        return 0.0
    rate = consumption_rate_ml_per_min(drink.type, drinking_speed)
    if rate <= 0:
        return 0.0
    return (drink.volume_ml / rate) * 60 * 1000


def blend_abv(base_ml: float, base_abv: float, mixer_ml: float, mixer_abv: float = 0.0) -> float:
    """Volume-weighted ABV of a base spirit topped with a mixer."""
    total = base_ml + mixer_ml
    if total <= 0:
        return base_abv
    pure = base_ml * (base_abv / 100.0) + mixer_ml * (mixer_abv / 100.0)
    return (pure / total) * 100.0


def list_drink_types():
    """Return list of (key, name) for UI dropdowns."""
    return [(key, DRINK_TYPE_NAMES[key]) for key in DRINK_TYPES]

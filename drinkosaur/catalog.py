"""
Drink reference library and mixers for the entry flow.
Values are typical for the brand/style; actual pours vary.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from drinkosaur.drinks import (
    DRINK_TYPES,
    DrinkEvent,
    InvalidDrinkError,
    blend_abv,
    now_ms,
    parse_timestamp_ms,
    validate_drink,
)

TYPE_ICONS = {
    "beer": "🍺",
    "wine": "🍷",
    "cocktail": "🍹",
    "spirit": "🥃",
    "other": "🍸",
}


@dataclass(frozen=True)
class DrinkReference:
    id: str
    name: str
    abv: float  # percent
    type: str  # beer, wine, cocktail, spirit, other
    color: str  # liquid colour for rendering
    carbonated: bool = False
    default_ml: float = 250.0

    @property
    def icon(self) -> str:
        return TYPE_ICONS.get(self.type, TYPE_ICONS["other"])


@dataclass(frozen=True)
class Mixer:
    id: str
    name: str
    color: str
    carbonated: bool = False
    abv: float = 0.0


def _r(bid: str, name: str, abv: float, typ: str, color: str, ml: float, carbonated: bool = False) -> DrinkReference:
    return DrinkReference(id=bid, name=name, abv=abv, type=typ, color=color, carbonated=carbonated, default_ml=ml)


LIBRARY: List[DrinkReference] = [
    # Lagers
    _r("heineken", "Heineken", 5.0, "beer", "#FCD34D", 250, True),
    _r("stella-artois", "Stella Artois", 5.0, "beer", "#FCD34D", 250, True),
    _r("1664", "1664", 5.5, "beer", "#FBBF24", 250, True),
    _r("kronenbourg", "Kronenbourg", 4.2, "beer", "#FCD34D", 250, True),
    _r("budweiser", "Budweiser", 5.0, "beer", "#FEF08A", 330, True),
    _r("corona", "Corona", 4.5, "beer", "#FEF9C3", 330, True),
    _r("lager", "Lager", 5.0, "beer", "#FCD34D", 250, True),
    _r("ipa", "IPA", 6.2, "beer", "#F59E0B", 330, True),
    # Wine
    _r("red-wine", "Red Wine", 13.5, "wine", "#7f1d1d", 125),
    _r("white-wine", "White Wine", 12.0, "wine", "#f5f5dc", 125),
    _r("champagne", "Champagne", 12.0, "wine", "#FDE68A", 125, True),
    # Spirits (single measure)
    _r("vodka", "Vodka", 40.0, "spirit", "#e5f2ff", 40),
    _r("whisky", "Whisky", 40.0, "spirit", "#d2a679", 40),
    _r("jack-daniels", "Jack Daniel's", 40.0, "spirit", "#B45309", 40),
    _r("jameson", "Jameson", 40.0, "spirit", "#D97706", 40),
    _r("nikka", "Nikka", 45.0, "spirit", "#92400E", 40),
    # Cocktails
    _r("mojito", "Mojito", 11.0, "cocktail", "#1e90ff", 200),
    _r("margarita", "Margarita", 18.0, "cocktail", "#d9f99d", 150),
    _r("spritz", "Spritz", 8.0, "cocktail", "#fb923c", 200, True),
]

MIXERS: List[Mixer] = [
    Mixer("coca-cola", "Coca-Cola", "#280802", carbonated=True),
    Mixer("tonic", "Tonic Water", "#E0F2FE", carbonated=True),
    Mixer("orange-juice", "Orange Juice", "#FB923C"),
    Mixer("soda", "Soda Water", "#F0F9FF", carbonated=True),
]

_LIBRARY_BY_ID: Dict[str, DrinkReference] = {r.id: r for r in LIBRARY}
_MIXERS_BY_ID: Dict[str, Mixer] = {m.id: m for m in MIXERS}


def get_reference(reference_id: str) -> Optional[DrinkReference]:
    return _LIBRARY_BY_ID.get(reference_id)


def get_mixer(mixer_id: str) -> Optional[Mixer]:
    return _MIXERS_BY_ID.get(mixer_id)


def build_drink(
    reference_id: str,
    volume_ml: float,
    timestamp: Any = None,
    is_chug: bool = False,
    mixer_id: Optional[str] = None,
    mixer_ml: float = 0.0,
) -> DrinkEvent:
    """Finalize a drink from the entry wizard: reference + pour (+ mixer)."""
    ref = get_reference(reference_id)
    if ref is None:
        raise InvalidDrinkError(f"Unknown drink reference: {reference_id}")
    if volume_ml <= 0:
        raise InvalidDrinkError("Drink volume must be greater than 0 ml")

    name = ref.name
    abv = ref.abv
    volume = volume_ml
    if mixer_id:
        mixer = get_mixer(mixer_id)
        if mixer is None:
            raise InvalidDrinkError(f"Unknown mixer: {mixer_id}")
        mixer_ml = max(0.0, mixer_ml)
        name = f"{name} & {mixer.name}"
        abv = blend_abv(volume_ml, ref.abv, mixer_ml, mixer.abv)
        volume = volume_ml + mixer_ml

    drink = DrinkEvent(
        id=str(uuid.uuid4()),
        name=name,
        volume_ml=round(volume),
        abv=round(abv, 1),
        timestamp=parse_timestamp_ms(timestamp) if timestamp is not None else now_ms(),
        is_chug=is_chug,
        type=ref.type,
        icon=ref.icon,
    )
    validate_drink(drink)
    return drink


@dataclass(frozen=True)
class ParsedDrink:
    """Result contract of the external free-text drink parser."""

    name: str
    volume_ml: float
    abv: float
    icon: str

    def to_drink_event(self, timestamp: Any = None, is_chug: bool = False) -> DrinkEvent:
        drink = DrinkEvent(
            id=str(uuid.uuid4()),
            name=self.name,
            volume_ml=self.volume_ml,
            abv=self.abv,
            timestamp=parse_timestamp_ms(timestamp),
            is_chug=is_chug,
            type="other",
            icon=self.icon,
        )
        validate_drink(drink)
        return drink


def parsed_drink_from_dict(raw: Any) -> ParsedDrink:
    """Validate the parser's JSON: name, volumeMl, abv and icon are required."""
    if not isinstance(raw, dict):
        raise InvalidDrinkError("Parsed drink must be an object")
    missing = [k for k in ("name", "volumeMl", "abv", "icon") if raw.get(k) in (None, "")]
    if missing:
        raise InvalidDrinkError(f"Parsed drink is missing: {', '.join(missing)}")
    try:
        volume_ml = float(raw["volumeMl"])
        abv = float(raw["abv"])
    except (TypeError, ValueError):
        raise InvalidDrinkError("Parsed drink volumeMl and abv must be numbers")
    return ParsedDrink(name=str(raw["name"]), volume_ml=volume_ml, abv=abv, icon=str(raw["icon"]))


def list_by_type() -> Dict[str, List[dict]]:
    """Group the library by drink type for the entry UI."""
    out: Dict[str, List[dict]] = {t: [] for t in DRINK_TYPES}
    for r in LIBRARY:
        out.setdefault(r.type, []).append({
            "id": r.id,
            "name": r.name,
            "abv": r.abv,
            "color": r.color,
            "carbonated": r.carbonated,
            "default_ml": r.default_ml,
            "icon": r.icon,
        })
    return out


def list_all_flat() -> List[dict]:
    return [
        {"id": r.id, "name": r.name, "type": r.type, "abv": r.abv, "default_ml": r.default_ml, "icon": r.icon}
        for r in LIBRARY
    ]


def list_mixers() -> List[dict]:
    return [{"id": m.id, "name": m.name, "color": m.color, "carbonated": m.carbonated} for m in MIXERS]

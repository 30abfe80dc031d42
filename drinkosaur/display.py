"""Dashboard helpers at the presentation boundary.

The core reports BAC in percent. The g/L convention (percent x 10) and the
driving warning only exist here.
"""

from drinkosaur.status import BacStatus

MAX_SAFE_BAC = 0.08
DRIVING_WARNING_GRAMS_PER_LITER = 0.5
LIMIT_LOAD_FULL_BAC = 0.20
PEAK_VISIBLE_MARGIN = 0.005

UNITS = {
    "percent": (1.0, 3, "%"),
    "g/L": (10.0, 2, "g/L"),
}


def to_display(bac: float, unit: str = "percent") -> float:
    scale, decimals, _ = UNITS.get(unit, UNITS["percent"])
    return round(bac * scale, decimals)


def limit_load_percent(bac: float) -> int:
    """How full the gauge is, 0.20% BAC being 100."""
    return round(min((bac / LIMIT_LOAD_FULL_BAC) * 100, 100))


def dashboard_summary(status: BacStatus, unit: str = "percent") -> dict:
    if unit not in UNITS:
        unit = "percent"
    _, decimals, label = UNITS[unit]
    grams_per_liter = status.current_bac * 10
    return {
        "value": to_display(status.current_bac, unit),
        "peak": to_display(status.peak_bac, unit),
        "unit": label,
        "decimals": decimals,
        "status_message": status.status_message,
        "color": status.color,
        "show_peak": status.peak_bac > status.current_bac + PEAK_VISIBLE_MARGIN,
        "peak_time": status.peak_time,
        "sober_timestamp": status.sober_timestamp,
        "limit_load_percent": limit_load_percent(status.current_bac),
        "driving_warning": grams_per_liter >= DRIVING_WARNING_GRAMS_PER_LITER,
        "over_legal_limit": status.current_bac >= MAX_SAFE_BAC,
    }

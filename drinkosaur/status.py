"""Current BAC status: current level, peak, projected sober time and label."""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from drinkosaur import calculations
from drinkosaur.calculations import BacPoint
from drinkosaur.drinks import DrinkEvent, now_ms
from drinkosaur.profile import UserProfile

logger = logging.getLogger(__name__)

THEME_COLORS = {
    "safe": "from-emerald-400 to-cyan-400",
    "buzz": "from-yellow-400 to-orange-400",
    "drunk": "from-pink-500 to-rose-500",
    "danger": "from-red-600 to-purple-600",
}

SETUP_REQUIRED = "Setup Required"
SOBER = "Sober"
BUZZY = "Buzzy"
TIPSY = "Tipsy"
LOADED = "Loaded"

TIPSY_BAC = 0.05
LOADED_BAC = 0.10
ESCALATION_BAC = 0.15
ESCALATION_STEP_BAC = 0.005

# Past 0.15% the label keeps escalating through this list, one entry per 0.005%.
FUNNY_EXPRESSIONS = (
    "bleu métal", "défoncé", "arraché", "satellisé", "imbibé",
    "plein comme un oeuf", "bourré", "beurré complet", "blindé",
    "cuit", "en pétard", "pinté", "pété", "raide", "rétamé",
    "torché", "brindezingue", "explosé", "queue de pelle",
    "cabane sur le chien", "pas loupé",
)

STATUS_HORIZON_AFTER_NOW_MS = 24 * calculations.HOUR_MS
STATUS_HORIZON_AFTER_LAST_DRINK_MS = 12 * calculations.HOUR_MS


@dataclass(frozen=True)
class BacStatus:
    current_bac: float
    peak_bac: float
    peak_time: Optional[int]
    sober_timestamp: Optional[int]
    status_message: str
    color: str

    def to_dict(self) -> dict:
        return {
            "currentBac": self.current_bac,
            "peakBac": self.peak_bac,
            "peakTime": self.peak_time,
            "soberTimestamp": self.sober_timestamp,
            "statusMessage": self.status_message,
            "color": self.color,
        }


def classify_bac(bac: float) -> Tuple[str, str]:
    """Return (label, theme color) for a BAC value (%)."""
    if bac <= 0:
        return SOBER, THEME_COLORS["safe"]
    if bac < TIPSY_BAC:
        return BUZZY, THEME_COLORS["buzz"]
    if bac < LOADED_BAC:
        return TIPSY, THEME_COLORS["drunk"]
    if bac < ESCALATION_BAC:
        return LOADED, THEME_COLORS["danger"]
    # Small bias so 0.155 lands on index 1 despite float division.
    index = math.floor((bac - ESCALATION_BAC) / ESCALATION_STEP_BAC + 1e-9)
    index = max(0, index) % len(FUNNY_EXPRESSIONS)
    return FUNNY_EXPRESSIONS[index], THEME_COLORS["danger"]


def _rounded(value: float) -> float:
    return max(0.0, round(value, 4))


def _empty_status(message: str) -> BacStatus:
    return BacStatus(0.0, 0.0, None, None, message, THEME_COLORS["safe"])


def find_current(points: List[BacPoint], now: int) -> float:
    for p in points:
        if p.time >= now:
            return p.bac
    return 0.0


def find_peak(points: List[BacPoint]) -> Tuple[float, Optional[int]]:
    """Maximum BAC and the first time it occurs; (0, None) with no alcohol."""
    peak = 0.0
    peak_time = None
    for p in points:
        if p.bac > peak:
            peak = p.bac
            peak_time = p.time
    return peak, peak_time


def find_sober_time(points: List[BacPoint], peak_time: Optional[int]) -> Optional[int]:
    if peak_time is None:
        return None
    for p in points:
        if p.time > peak_time and p.bac <= 0:
            return p.time
    return None


def status_window(drinks: List[DrinkEvent], profile: UserProfile, now: int) -> Tuple[int, int]:
    """Simulation bounds for a status run, long enough to reach sobriety."""
    start = drinks[0].timestamp
    end = max(
        now + STATUS_HORIZON_AFTER_NOW_MS,
        drinks[-1].timestamp + STATUS_HORIZON_AFTER_LAST_DRINK_MS,
    )
    sober_by = calculations.sober_horizon(drinks, profile) + calculations.STATUS_STEP_MS
    if sober_by > end:
        logger.debug("Extending status horizon by %d ms", sober_by - end)
        end = int(math.ceil(sober_by))
    return start, end


def calculate_status(
    drinks: Iterable[DrinkEvent],
    profile: UserProfile,
    now: Optional[int] = None,
) -> BacStatus:
    if not profile.is_setup:
        return _empty_status(SETUP_REQUIRED)
    ordered = calculations.sorted_drinks(drinks)
    if not ordered:
        return _empty_status(SOBER)
    if now is None:
        now = now_ms()

    start, end = status_window(ordered, profile, now)
    points = calculations.simulate_bac(ordered, profile, start, end, calculations.STATUS_STEP_MS)

    current = _rounded(find_current(points, now))
    peak, peak_time = find_peak(points)
    sober_time = find_sober_time(points, peak_time)
    label, color = classify_bac(current)
    return BacStatus(
        current_bac=current,
        peak_bac=_rounded(peak),
        peak_time=peak_time,
        sober_timestamp=sober_time,
        status_message=label,
        color=color,
    )

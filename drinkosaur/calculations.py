"""BAC simulation: graded absorption and linear (zero-order) elimination.

Model:
- Each drink's potential rise is Widmark: grams / (weight_kg * r) / 10 (% BAC)
- That rise is absorbed uniformly over the absorption window:
  consumption time (0 for a chug) + a fixed 45 min gastric delay
- Elimination: 0.015 BAC percentage points per hour, never below zero

The simulator is a pure function of its arguments. It walks a fixed step and
keeps a running sum; smaller steps give smoother curves.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple

from drinkosaur.drinks import DrinkEvent, alcohol_grams, consumption_duration_ms
from drinkosaur.profile import UserProfile

logger = logging.getLogger(__name__)

# Elimination rate (% BAC per hour).
METABOLISM_RATE = 0.015

ABSORPTION_DELAY_MIN = 45

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

STATUS_STEP_MS = MINUTE_MS
TREND_STEP_MS = 5 * MINUTE_MS
TREND_HALF_WINDOW_MS = 7 * HOUR_MS


class BacPoint(NamedTuple):
    time: int
    bac: float


@dataclass(frozen=True)
class AbsorptionEvent:
    start: int
    end: float
    total_bac: float
    rate_per_ms: float

    @property
    def is_instant(self) -> bool:
        return self.end <= self.start

    def absorbed_during(self, t: float, step_ms: float) -> float:
        """BAC absorbed in the step beginning at t."""
        if self.is_instant:
            # Zero-length window: the whole dose lands in the step holding start.
            return self.total_bac if t <= self.start < t + step_ms else 0.0
        if self.start <= t < self.end:
            return self.rate_per_ms * step_ms
        return 0.0


def elimination_per_ms(metabolism_rate: float = METABOLISM_RATE) -> float:
    return metabolism_rate / HOUR_MS


def potential_bac(drink: DrinkEvent, profile: UserProfile) -> float:
    """Full BAC rise (%) the drink would cause if absorbed with no elimination."""
    if not drink.is_valid or profile.weight_kg <= 0:
        return 0.0
    grams = alcohol_grams(drink.volume_ml, drink.abv)
    return (grams / (profile.weight_kg * profile.widmark_ratio)) / 10.0


def absorption_event(
    drink: DrinkEvent,
    profile: UserProfile,
    absorption_delay_min: float = ABSORPTION_DELAY_MIN,
) -> AbsorptionEvent:
    duration = consumption_duration_ms(drink, profile.speed) if drink.is_valid else 0.0
    window_ms = duration + absorption_delay_min * MINUTE_MS
    total = potential_bac(drink, profile)
    rate = total / window_ms if window_ms > 0 else 0.0
    return AbsorptionEvent(
        start=drink.timestamp,
        end=drink.timestamp + window_ms,
        total_bac=total,
        rate_per_ms=rate,
    )


def sorted_drinks(drinks: Iterable[DrinkEvent]) -> List[DrinkEvent]:
    return sorted(drinks, key=lambda d: d.timestamp)


def simulate_bac(
    drinks: Iterable[DrinkEvent],
    profile: UserProfile,
    start_time: int,
    end_time: int,
    step_ms: int = STATUS_STEP_MS,
    metabolism_rate: float = METABOLISM_RATE,
    absorption_delay_min: float = ABSORPTION_DELAY_MIN,
) -> List[BacPoint]:
    """Return (time, bac_percent) points covering [start_time, end_time]."""
    if step_ms <= 0:
        raise ValueError("step_ms must be > 0")

    ordered = sorted_drinks(drinks)
    points: List[BacPoint] = []
    if not ordered:
        t = start_time
        while t <= end_time:
            points.append(BacPoint(t, 0.0))
            t += step_ms
        return points

    events = [absorption_event(d, profile, absorption_delay_min) for d in ordered]
    eliminated_per_step = elimination_per_ms(metabolism_rate) * step_ms
    first_drink_time = ordered[0].timestamp
    logger.debug(
        "Simulating %d drinks from %s to %s (step %d ms)",
        len(events), start_time, end_time, step_ms,
    )

    t = start_time
    while t < first_drink_time and t <= end_time:
        points.append(BacPoint(t, 0.0))
        t += step_ms

    # Start at the first drink rather than start_time; nothing happens before it.
    t_sim = first_drink_time
    current = 0.0
    while t_sim <= end_time:
        current += sum(e.absorbed_during(t_sim, step_ms) for e in events)
        if current > 0:
            current = max(0.0, current - eliminated_per_step)
        if t_sim >= start_time:
            points.append(BacPoint(t_sim, current))
        t_sim += step_ms
    return points


def bac_trend(
    drinks: Iterable[DrinkEvent],
    profile: UserProfile,
    center_time: int,
    step_ms: int = TREND_STEP_MS,
) -> List[BacPoint]:
    """Points for charting: +/- 7 hours around center_time at a 5 minute step."""
    return simulate_bac(
        drinks,
        profile,
        center_time - TREND_HALF_WINDOW_MS,
        center_time + TREND_HALF_WINDOW_MS,
        step_ms,
    )


def sober_horizon(
    drinks: Iterable[DrinkEvent],
    profile: UserProfile,
    metabolism_rate: float = METABOLISM_RATE,
) -> float:
    """Latest instant by which BAC is guaranteed to be back at zero."""
    events = [absorption_event(d, profile) for d in drinks]
    if not events:
        return 0.0
    total = sum(e.total_bac for e in events)
    last_end = max(max(e.end, e.start) for e in events)
    rate = elimination_per_ms(metabolism_rate)
    if rate <= 0:
        return last_end
    return last_end + total / rate

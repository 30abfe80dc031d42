"""
Drink log: profile plus the drinks logged so far.
The log is owned by the application; every status or trend call re-runs the
pure simulator on a snapshot of it.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from drinkosaur import calculations
from drinkosaur.drinks import DrinkEvent, now_ms, validate_drink
from drinkosaur.profile import UserProfile
from drinkosaur.status import BacStatus, calculate_status


@dataclass
class Session:
    profile: UserProfile
    _drinks: List[DrinkEvent] = field(default_factory=list)

    def add_drink(self, drink: DrinkEvent) -> None:
        validate_drink(drink)
        self._drinks.append(drink)

    def remove_drink(self, drink_id: str) -> bool:
        before = len(self._drinks)
        self._drinks = [d for d in self._drinks if d.id != drink_id]
        return len(self._drinks) != before

    def clear(self) -> None:
        self._drinks = []

    @property
    def drinks(self) -> List[DrinkEvent]:
        return calculations.sorted_drinks(self._drinks)

    def status(self, now: Optional[int] = None) -> BacStatus:
        return calculate_status(tuple(self._drinks), self.profile, now=now)

    def trend(self, center_time: Optional[int] = None) -> List[calculations.BacPoint]:
        if center_time is None:
            center_time = now_ms()
        return calculations.bac_trend(tuple(self._drinks), self.profile, center_time)

    def history_by_day(self) -> List[Tuple[date, List[DrinkEvent]]]:
        """Drinks newest first, grouped by local calendar day (newest day first)."""
        groups: Dict[date, List[DrinkEvent]] = {}
        for d in sorted(self._drinks, key=lambda x: x.timestamp, reverse=True):
            day = datetime.fromtimestamp(d.timestamp / 1000).date()
            groups.setdefault(day, []).append(d)
        return sorted(groups.items(), key=lambda kv: kv[0], reverse=True)

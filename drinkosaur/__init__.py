"""
Drinkosaur: BAC simulation from a drink log (graded absorption, linear elimination).
Use from project root: python -m drinkosaur.main
"""

from drinkosaur.drinks import (
    DRINK_TYPES,
    DrinkEvent,
    InvalidDrinkError,
    alcohol_grams,
    list_drink_types,
)
from drinkosaur.profile import UserProfile
from drinkosaur.calculations import (
    BacPoint,
    absorption_event,
    bac_trend,
    simulate_bac,
)
from drinkosaur.status import BacStatus, calculate_status, classify_bac
from drinkosaur.session import Session
from drinkosaur.graph import save_bac_graph, trend_data

__all__ = [
    "Session",
    "BacPoint",
    "BacStatus",
    "DrinkEvent",
    "InvalidDrinkError",
    "UserProfile",
    "absorption_event",
    "alcohol_grams",
    "bac_trend",
    "calculate_status",
    "classify_bac",
    "simulate_bac",
    "save_bac_graph",
    "trend_data",
    "list_drink_types",
    "DRINK_TYPES",
]

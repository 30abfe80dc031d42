"""User physiological profile used by the BAC simulator."""

from dataclasses import dataclass
from typing import Any

from drinkosaur.drinks import DRINKING_SPEEDS

# Widmark distribution ratio by sex.
GENDER_CONSTANT = {
    "male": 0.7,
    "female": 0.6,
}


@dataclass(frozen=True)
class UserProfile:
    weight_kg: float = 0.0
    gender: str = "male"
    drinking_speed: str = "average"

    @property
    def is_setup(self) -> bool:
        return self.weight_kg > 0

    @property
    def widmark_ratio(self) -> float:
        return GENDER_CONSTANT.get(self.gender, GENDER_CONSTANT["male"])

    @property
    def speed(self) -> str:
        return self.drinking_speed if self.drinking_speed in DRINKING_SPEEDS else "average"

    def to_dict(self) -> dict:
        return {
            "weightKg": self.weight_kg,
            "gender": self.gender,
            "drinkingSpeed": self.drinking_speed,
        }

    @classmethod
    def from_dict(cls, raw: Any, strict: bool = False) -> "UserProfile":
        """Build from the JSON profile contract.

        A missing or unparsable weight yields an unset profile rather than an
        error. With strict=True unknown gender or speed values raise ValueError.
        """
        if not isinstance(raw, dict):
            return cls()
        try:
            weight = float(raw.get("weightKg", raw.get("weight_kg", 0)) or 0)
        except (TypeError, ValueError):
            weight = 0.0
        gender = str(raw.get("gender") or "male").strip().lower()
        speed = str(raw.get("drinkingSpeed", raw.get("drinking_speed")) or "average").strip().lower()
        if gender not in GENDER_CONSTANT:
            if strict:
                raise ValueError("Gender must be male or female")
            gender = "male"
        if speed not in DRINKING_SPEEDS:
            if strict:
                raise ValueError("Drinking speed must be slow, average, or fast")
            speed = "average"
        return cls(weight_kg=weight, gender=gender, drinking_speed=speed)

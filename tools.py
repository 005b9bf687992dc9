import math
from typing import Any, Iterable


class MathTools:
    """Numeric helpers shared by the editor and the statistics functions."""

    LB_PER_TON: float = 2000.0
    LB_PER_CAR: float = 3000.0
    SECONDS_PER_DAY: int = 60 * 60 * 24

    @staticmethod
    def to_float(value: Any, default: float = 0.0) -> float:
        """Parse ``value`` as a finite, non-negative float or return ``default``."""
        if isinstance(value, bool):
            return float(value)
        try:
            result = float(str(value).strip()) if isinstance(value, str) else float(value)
        except (TypeError, ValueError):
            return default
        if math.isnan(result) or math.isinf(result) or result < 0:
            return default
        return result

    @classmethod
    def to_int(cls, value: Any, default: int = 0) -> int:
        """Parse ``value`` as a non-negative integer, truncating decimals."""
        result = cls.to_float(value, float(default))
        return int(result)

    @staticmethod
    def to_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on", "y"}
        return bool(value)

    @staticmethod
    def volume(sets: Iterable[tuple[int, float]]) -> float:
        """Compute training volume as the sum of reps times weight."""
        vol = 0.0
        for reps, weight in sets:
            vol += reps * weight
        return vol

    @classmethod
    def days_between(cls, seconds: float) -> float:
        """Whole days covering ``seconds``, rounded up. Infinite stays infinite."""
        if math.isinf(seconds):
            return math.inf
        return float(math.ceil(abs(seconds) / cls.SECONDS_PER_DAY))

    @classmethod
    def tons(cls, pounds: float) -> float:
        return round(pounds / cls.LB_PER_TON, 1)

    @classmethod
    def cars(cls, pounds: float) -> int:
        return math.floor(pounds / cls.LB_PER_CAR)

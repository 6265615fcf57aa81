from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Union
import math

from ..utils.validators import calculate_bmi, parse_blood_pressure

BASE_SCORE = 75
RECENT_CHECKUP_DAYS = 182

NORMAL_SYSTOLIC = (90, 120)
NORMAL_DIASTOLIC = (60, 80)
ELEVATED_SYSTOLIC_MAX = 139
ELEVATED_DIASTOLIC_MAX = 89
NORMAL_HEART_RATE = (60, 100)
NORMAL_BMI = (18.5, 24.9)


def _field(data: Optional[Mapping[str, Any]], *names: str) -> Any:
    """First non-empty value among camelCase/snake_case spellings."""
    if not data:
        return None
    for name in names:
        value = data.get(name)
        if value not in (None, ""):
            return value
    return None


def _number(value: Any) -> Optional[float]:
    """Finite float reading, or None when the value is not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _within(value: float, bounds) -> bool:
    low, high = bounds
    return low <= value <= high


def blood_pressure_delta(blood_pressure: Optional[str]) -> int:
    reading = parse_blood_pressure(blood_pressure)
    if reading is None:
        return 0
    systolic, diastolic = reading
    if _within(systolic, NORMAL_SYSTOLIC) and _within(diastolic, NORMAL_DIASTOLIC):
        return 10
    if (
        systolic >= NORMAL_SYSTOLIC[0] and diastolic >= NORMAL_DIASTOLIC[0]
        and systolic <= ELEVATED_SYSTOLIC_MAX and diastolic <= ELEVATED_DIASTOLIC_MAX
    ):
        return -5
    return -15


def _bmi(metrics: Optional[Mapping[str, Any]]) -> Optional[float]:
    bmi = _number(_field(metrics, "bmi"))
    if bmi is not None:
        return bmi
    weight, height = _number(_field(metrics, "weight")), _number(_field(metrics, "height"))
    if weight and height is not None and height > 0:
        return calculate_bmi(weight, height)
    return None


def has_recent_checkup(
    appointments: Iterable[Mapping[str, Any]],
    today: date
) -> bool:
    window_start = today - timedelta(days=RECENT_CHECKUP_DAYS)
    for appointment in appointments:
        when = _as_date(_field(appointment, "appointmentDate", "appointment_date"))
        if when is not None and window_start <= when <= today:
            return True
    return False


def compute_health_score(
    metrics: Optional[Mapping[str, Any]],
    appointments: Iterable[Mapping[str, Any]] = (),
    now: Optional[datetime] = None
) -> int:
    """Summarize the latest vitals and checkup recency as a 0-100 score.

    Starts from 75. Missing or unreadable readings leave the score unchanged;
    readings outside their normal band pull it down.
    """
    today = _as_date(now or datetime.now())
    score = BASE_SCORE

    score += blood_pressure_delta(_field(metrics, "bloodPressure", "blood_pressure"))

    heart_rate = _number(_field(metrics, "heartRate", "heart_rate"))
    if heart_rate is not None:
        score += 5 if _within(heart_rate, NORMAL_HEART_RATE) else -10

    bmi = _bmi(metrics)
    if bmi is not None:
        score += 5 if _within(bmi, NORMAL_BMI) else -10

    if has_recent_checkup(appointments, today):
        score += 5

    return max(0, min(100, score))

import re
from typing import Optional

from ..core.config import settings

APPOINTMENT_TIME_RE = re.compile(r"^(0?[1-9]|1[0-2]):[0-5][0-9]\s?(AM|PM)$", re.IGNORECASE)
BLOOD_PRESSURE_RE = re.compile(r"^\s*(\d{2,3})\s*/\s*(\d{2,3})\s*$")


def validate_appointment_time(value: str) -> str:
    """Accept "HH:MM AM/PM" and normalise it to "09:30 AM"."""
    value = value.strip()
    match = APPOINTMENT_TIME_RE.match(value)
    if not match:
        raise ValueError("Invalid time format. Use HH:MM AM/PM")
    clock, meridiem = value[:-2].strip(), match.group(2).upper()
    hours, minutes = clock.split(":")
    return f"{int(hours):02d}:{minutes} {meridiem}"


def parse_blood_pressure(value: Optional[str]):
    """Split "120/80" into (systolic, diastolic); None when unparseable."""
    if not value:
        return None
    match = BLOOD_PRESSURE_RE.match(value)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def calculate_bmi(weight: float, height: float) -> float:
    """BMI from weight in kg and height in cm, to one decimal."""
    height_in_meters = height / 100
    return round(weight / (height_in_meters * height_in_meters), 1)


def parse_search_query(query: Optional[str]) -> str:
    if not query or not isinstance(query, str):
        return ""
    return re.sub(r"[^\w\s-]", "", query.strip())


def generate_meeting_link(appointment_id: int) -> str:
    base_url = settings.FRONTEND_URL or "https://healthlink-kromium.onrender.com"
    return f"{base_url.rstrip('/')}/video-consultation/{appointment_id}"

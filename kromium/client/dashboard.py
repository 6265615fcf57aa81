from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any, Dict, List, Optional
import logging

from .health_score import compute_health_score
from .http import ApiError
from .services.registry import ServiceRegistry

logger = logging.getLogger(__name__)

UPCOMING_STATUSES = ("Scheduled", "Confirmed")
TIME_FORMAT = "%I:%M %p"


@dataclass
class PatientDashboard:
    doctors: List[Dict[str, Any]] = field(default_factory=list)
    appointments: List[Dict[str, Any]] = field(default_factory=list)
    upcoming: List[Dict[str, Any]] = field(default_factory=list)
    metrics: Optional[Dict[str, Any]] = None
    health_score: int = 75
    # Total reported by the server; `doctors` holds one page only
    doctor_total: Optional[int] = None

    @property
    def doctor_count(self) -> int:
        if self.doctor_total is not None:
            return self.doctor_total
        return len(self.doctors)

    @property
    def appointment_count(self) -> int:
        return len(self.appointments)

    @property
    def upcoming_count(self) -> int:
        return len(self.upcoming)


def _latest_metrics(services: ServiceRegistry) -> Optional[Dict[str, Any]]:
    try:
        return services.health_metrics.latest().get("metrics")
    except ApiError as e:
        if e.is_not_found:
            return None
        raise


def _slot_time(value: Optional[str]) -> time:
    """Clock time of an "HH:MM AM" slot; unreadable slots sort last."""
    try:
        return datetime.strptime((value or "").strip(), TIME_FORMAT).time()
    except ValueError:
        return time.max


def _doctor_total(response: Dict[str, Any]) -> Optional[int]:
    pagination = response.get("pagination") or {}
    total = pagination.get("total", response.get("count"))
    return total if isinstance(total, int) else None


def load_patient_dashboard(
    services: ServiceRegistry,
    now: Optional[datetime] = None
) -> PatientDashboard:
    """Fetch doctors, appointments and the latest metrics concurrently."""
    now = now or datetime.now()
    with ThreadPoolExecutor(max_workers=3) as pool:
        doctors = pool.submit(services.doctors.list_doctors)
        appointments = pool.submit(services.appointments.list_appointments)
        metrics = pool.submit(_latest_metrics, services)

        doctor_response = doctors.result()
        appointment_list = appointments.result().get("appointments", [])
        latest = metrics.result()

    doctor_list = doctor_response.get("doctors", [])
    today = now.date().isoformat()
    upcoming = sorted(
        (
            a for a in appointment_list
            if a.get("status") in UPCOMING_STATUSES and a.get("appointmentDate", "") >= today
        ),
        key=lambda a: (a.get("appointmentDate", ""), _slot_time(a.get("appointmentTime"))),
    )
    logger.debug(
        f"Dashboard loaded: {len(doctor_list)} doctors, "
        f"{len(appointment_list)} appointments, metrics={'yes' if latest else 'no'}"
    )
    return PatientDashboard(
        doctors=doctor_list,
        appointments=appointment_list,
        upcoming=upcoming,
        metrics=latest,
        health_score=compute_health_score(latest, appointment_list, now=now),
        doctor_total=_doctor_total(doctor_response),
    )

from datetime import date
from typing import Callable, Optional
import logging

from .http import ApiError
from .services.appointments import AppointmentService

logger = logging.getLogger(__name__)

TIME_SLOTS = (
    "09:00 AM", "09:30 AM", "10:00 AM", "10:30 AM",
    "11:00 AM", "11:30 AM", "02:00 PM", "02:30 PM",
    "03:00 PM", "03:30 PM", "04:00 PM", "04:30 PM",
)

DEFAULT_TYPE = "Consultation"
DEFAULT_MODE = "In-person"

SUCCESS_MESSAGE = "Appointment booked successfully!"
FAILURE_MESSAGE = "Failed to book appointment. Please try again."

# notify(level, message) where level is "success" or "error"
Notify = Callable[[str, str], None]


def _ignore(level: str, message: str) -> None:
    pass


class BookingForm:
    """Appointment booking dialog state for one doctor."""

    def __init__(
        self,
        doctor_id: int,
        appointments: AppointmentService,
        notify: Notify = _ignore,
        on_success: Optional[Callable[[], None]] = None
    ):
        self.doctor_id = doctor_id
        self.appointments = appointments
        self.notify = notify
        self.on_success = on_success
        self.is_open = False
        self.loading = False
        self.reset()

    def reset(self) -> None:
        self.date: Optional[date] = None
        self.appointment_time = ""
        self.type = DEFAULT_TYPE
        self.mode = DEFAULT_MODE
        self.reason = ""
        self.notes = ""

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def validate(self) -> Optional[str]:
        """First problem with the current input, or None when it can be sent."""
        if self.date is None:
            return "Please select a date"
        if not self.appointment_time:
            return "Please select a time"
        if not self.reason.strip():
            return "Please provide a reason for the appointment"
        return None

    def payload(self) -> dict:
        return {
            "doctor": self.doctor_id,
            "appointmentDate": self.date.isoformat(),
            "appointmentTime": self.appointment_time,
            "type": self.type,
            "mode": self.mode,
            "reason": self.reason,
            "notes": self.notes,
        }

    def submit(self) -> bool:
        error = self.validate()
        if error:
            self.notify("error", error)
            return False

        self.loading = True
        try:
            response = self.appointments.create_appointment(self.payload())
        except ApiError as e:
            logger.error(f"Error booking appointment: {e.message}")
            self.notify("error", e.payload.get("message") or FAILURE_MESSAGE)
            return False
        finally:
            self.loading = False

        if not response.get("success"):
            self.notify("error", response.get("message") or FAILURE_MESSAGE)
            return False

        self.notify("success", SUCCESS_MESSAGE)
        self.close()
        self.reset()
        if self.on_success:
            self.on_success()
        return True

from ..http import ApiClient
from .appointments import AppointmentService
from .auth import AuthService
from .chat import ChatService
from .doctors import DoctorService
from .health_metrics import HealthMetricService
from .medical_records import MedicalRecordService
from .users import UserService


class ServiceRegistry:
    """One instance of every resource service over a shared ApiClient."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.auth = AuthService(api)
        self.users = UserService(api)
        self.doctors = DoctorService(api)
        self.appointments = AppointmentService(api)
        self.medical_records = MedicalRecordService(api)
        self.health_metrics = HealthMetricService(api)
        self.chat = ChatService(api)

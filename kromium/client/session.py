from typing import Any, Dict, Optional
import json
import logging

from .http import ApiClient
from .services.auth import AuthService
from .storage import KeyValueStore, TOKEN_KEY, USER_KEY

logger = logging.getLogger(__name__)

DOCTOR_DASHBOARD = "/dashboard/doctor"
PATIENT_DASHBOARD = "/dashboard/patient"


class Session:
    """The signed-in user and their token, restored from and persisted to a store.

    Create one per application run, ``open()`` it before use and ``close()`` it
    on shutdown (or use it as a context manager).
    """

    def __init__(self, api: ApiClient, store: Optional[KeyValueStore] = None):
        self.api = api
        self.store = store if store is not None else api.store
        self.auth = AuthService(api)
        self.user: Optional[Dict[str, Any]] = None

    def open(self) -> "Session":
        stored_user = self.store.get(USER_KEY)
        token = self.store.get(TOKEN_KEY)
        if stored_user and token:
            try:
                self.user = json.loads(stored_user)
            except ValueError:
                logger.warning("Stored user is unreadable, starting signed out")
                self.user = None
        return self

    def close(self) -> None:
        self.api.close()

    def __enter__(self) -> "Session":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_authenticated(self) -> bool:
        # A 401 from any call wipes the stored token
        return self.user is not None and self.store.get(TOKEN_KEY) is not None

    @property
    def token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    @property
    def role(self) -> Optional[str]:
        return self.user.get("role") if self.user else None

    @property
    def dashboard_path(self) -> str:
        return DOCTOR_DASHBOARD if self.role == "doctor" else PATIENT_DASHBOARD

    def _remember(self, response: Dict[str, Any]) -> Dict[str, Any]:
        if response.get("success") and response.get("token"):
            self.store.set(TOKEN_KEY, response["token"])
            self.store.set(USER_KEY, json.dumps(response["user"]))
            self.user = response["user"]
        return response

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._remember(self.auth.login(email, password))

    def signup(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._remember(self.auth.register(data))

    def logout(self) -> None:
        self.store.remove(TOKEN_KEY)
        self.store.remove(USER_KEY)
        self.user = None
        logger.info("User logged out")

    def update_profile(self, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge updates into the local user; the server is not contacted."""
        if self.user is None:
            return None
        self.user = {**self.user, **updates}
        self.store.set(USER_KEY, json.dumps(self.user))
        return self.user

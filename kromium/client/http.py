from typing import Any, Dict, Optional
import logging

import httpx

from .storage import KeyValueStore, MemoryStore, TOKEN_KEY, USER_KEY

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT = 10.0
CONNECTION_ERROR_MESSAGE = "Cannot connect to server. Please check your connection."


class ApiError(Exception):
    """A failed API call, carrying the server's message when it sent one."""

    def __init__(self, status_code: Optional[int], message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class ApiClient:
    """JSON HTTP client for the Kromium API.

    Every request carries the bearer token found in ``store`` under ``token``.
    A 401 response removes the stored token and user, since the session they
    belong to is no longer valid.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        store: Optional[KeyValueStore] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT
    ):
        self.store = store if store is not None else MemoryStore()
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    @property
    def token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    def _headers(self) -> Dict[str, str]:
        token = self.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        logger.debug(f"API Request: {method} {path}")
        try:
            response = self.http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"API request {method} {path} failed: {e!r}")
            raise ApiError(None, CONNECTION_ERROR_MESSAGE) from e

        payload = self._decode(response)
        if response.is_error:
            message = payload.get("message") or response.reason_phrase or "Request failed"
            logger.warning(f"API Error: {method} {path} - Status: {response.status_code} - {message}")
            if response.status_code == 401:
                self.store.remove(TOKEN_KEY)
                self.store.remove(USER_KEY)
            raise ApiError(response.status_code, message, payload)

        logger.debug(f"API Response: {path} {response.status_code}")
        return payload

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {"data": payload}

    def get(self, path: str, params: Optional[dict] = None) -> Dict[str, Any]:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Optional[dict] = None) -> Dict[str, Any]:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Optional[dict] = None) -> Dict[str, Any]:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Dict[str, Any]:
        return self.request("DELETE", path)

    def upload(self, path: str, files: dict, data: Optional[dict] = None) -> Dict[str, Any]:
        return self.request("POST", path, files=files, data=data)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

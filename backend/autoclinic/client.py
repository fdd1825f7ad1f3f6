"""
HTTP client for the Auto Clinic API, as used by the app and scripts.

Session state lives in an explicit ``SessionContext`` rather than in shared
client defaults. Any 401 clears the session and calls ``on_unauthorized``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass
class SessionContext:
    token: Optional[str] = None
    account: dict = field(default_factory=dict)
    on_unauthorized: Optional[Callable[["SessionContext"], None]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def clear(self):
        self.token = None
        self.account = {}


class ApiClient:
    def __init__(
        self,
        base_url: str,
        session: Optional[SessionContext] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 15.0,
    ):
        self.session = session or SessionContext()
        self._http = httpx.Client(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        resp = self._http.request(method, path, json=json, headers=self.session.auth_headers())
        if resp.status_code == 401 and self.session.is_authenticated:
            logger.info("Session rejected by server; clearing it")
            self.session.clear()
            if self.session.on_unauthorized is not None:
                self.session.on_unauthorized(self.session)
        if resp.is_error:
            try:
                message = resp.json().get("error") or resp.reason_phrase
            except ValueError:
                message = resp.reason_phrase
            raise ApiError(resp.status_code, message)
        return resp.json()

    # ─── Auth ───

    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/login", {
            "email": (email or "").strip().lower(),
            "password": password,
        })
        self.session.token = data["token"]
        self.session.account = {k: v for k, v in data.items() if k != "token"}
        return data

    def logout(self):
        self.session.clear()

    def forgot_password(self, email: str) -> str:
        data = self._request("POST", "/api/auth/forgot-password", {"email": (email or "").strip().lower()})
        return data["message"]

    def reset_password(self, token: str, password: str) -> str:
        data = self._request("POST", "/api/auth/reset-password", {"token": token, "password": password})
        return data["message"]

    # ─── Profile ───

    def get_profile(self) -> dict:
        profile = self._request("GET", "/api/profile")
        self.session.account.update(profile)
        return profile

    def update_profile(self, **fields) -> dict:
        profile = self._request("PUT", "/api/profile", fields)
        self.session.account.update(profile)
        return profile

"""HTTP client for the InsightBoard API, used by the terminal dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import TypeAdapter

from insightboard.schemas.auth import CurrentUser, UserOut
from insightboard.schemas.kpis import DailyRevenuePoint, KpiSummary, TopEventType

DEFAULT_TIMEOUT_SEC = 10.0

_summary_adapter = TypeAdapter(KpiSummary)
_daily_adapter = TypeAdapter(list[DailyRevenuePoint])
_top_adapter = TypeAdapter(list[TopEventType])


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SessionExpiredError(ApiError):
    """Raised on 401 while loading dashboard data; the held token has been discarded."""


@dataclass(frozen=True)
class DashboardData:
    """Everything the dashboard renders, fetched in one pass."""

    user: CurrentUser
    summary: KpiSummary
    daily: list[DailyRevenuePoint]
    top: list[TopEventType]


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500] if resp.text else f"HTTP {resp.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {resp.status_code}"


class InsightBoardClient:
    """
    Thin synchronous client. The token lives only in memory on this object;
    any 401 from a protected endpoint clears it.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.token = token
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> InsightBoardClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _request(self, method: str, path: str, json: Any = None, auth: bool = False) -> Any:
        headers: dict[str, str] = {}
        if auth:
            if self.token is None:
                raise SessionExpiredError("Not logged in.", 401)
            headers["Authorization"] = f"Bearer {self.token}"
        resp = self._http.request(method, path, json=json, headers=headers)
        if resp.status_code == 401 and auth:
            self.token = None
            raise SessionExpiredError(_error_message(resp), 401)
        if resp.status_code >= 400:
            raise ApiError(_error_message(resp), resp.status_code)
        return resp.json()

    def health(self) -> bool:
        return bool(self._request("GET", "/health").get("ok"))

    def register(self, email: str, password: str, role: str | None = None) -> UserOut:
        body: dict[str, str] = {"email": email, "password": password}
        if role is not None:
            body["role"] = role
        data = self._request("POST", "/auth/register", json=body, auth=False)
        return UserOut.model_validate(data["user"])

    def login(self, email: str, password: str) -> str:
        """Exchange credentials for a token and keep it for later calls."""
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    def me(self) -> CurrentUser:
        return CurrentUser.model_validate(self._request("GET", "/me", auth=True))

    def summary(self) -> KpiSummary:
        return _summary_adapter.validate_python(self._request("GET", "/kpis/summary", auth=True))

    def daily(self) -> list[DailyRevenuePoint]:
        return _daily_adapter.validate_python(self._request("GET", "/kpis/daily", auth=True))

    def top(self) -> list[TopEventType]:
        return _top_adapter.validate_python(self._request("GET", "/kpis/top", auth=True))

    def load_dashboard(self) -> DashboardData:
        """Fetch identity and all KPI payloads. Raises SessionExpiredError on any 401."""
        return DashboardData(
            user=self.me(),
            summary=self.summary(),
            daily=self.daily(),
            top=self.top(),
        )

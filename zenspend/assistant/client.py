from __future__ import annotations

from typing import Any, Optional

import httpx

from zenspend.core.config import settings


class AssistantError(Exception):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ZenSpendClient:
    """Thin HTTP client over the REST API that unwraps the response envelope.

    ``http`` may be any ``httpx.Client`` (tests pass a FastAPI ``TestClient``);
    ``prefix`` is prepended to every path for clients whose base URL does not
    already include ``/api``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        http: Optional[httpx.Client] = None,
        prefix: str = "",
        timeout: Optional[float] = None,
    ) -> None:
        self._owns_http = http is None
        self.http = http or httpx.Client(
            base_url=base_url or settings.ASSISTANT_API_URL,
            timeout=timeout if timeout is not None else settings.ASSISTANT_TIMEOUT,
            headers={"Content-Type": "application/json"},
        )
        self.prefix = prefix.rstrip("/")

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "ZenSpendClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> Any:
        try:
            resp = self.http.request(method, f"{self.prefix}{path}", params=params, json=json)
        except httpx.HTTPError as exc:
            raise AssistantError(f"API request failed: {exc}") from exc
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.is_error or not body.get("success", False):
            error = body.get("error") or {}
            raise AssistantError(error.get("message") or "API request failed", status_code=resp.status_code)
        return body.get("data")

    # ---- Transactions ----------------------------------------------------
    def list_transactions(self, **filters: Any) -> list[dict]:
        params = {k: v for k, v in filters.items() if v is not None}
        return self._request("GET", "/transactions", params=params)

    def create_transaction(self, payload: dict) -> dict:
        return self._request("POST", "/transactions", json=payload)

    def create_recurring(self, base: dict, months: Optional[int] = None) -> list[dict]:
        body: dict[str, Any] = {"base": base}
        if months is not None:
            body["months"] = months
        return self._request("POST", "/transactions/recurring", json=body)

    def delete_transaction(self, txn_id: str) -> dict:
        return self._request("DELETE", f"/transactions/{txn_id}")

    # ---- Categories / settings --------------------------------------------
    def list_categories(self) -> list[dict]:
        return self._request("GET", "/categories")

    def get_settings(self) -> dict:
        return self._request("GET", "/settings")

    def update_settings(self, updates: dict) -> dict:
        return self._request("PUT", "/settings", json=updates)

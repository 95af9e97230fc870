"""
REST client for the Task Manager API.

Authentication state is an explicit ``AuthContext`` handed to every call.
It is populated when a token resolves to a user (login, register, resume)
and cleared on logout or on any 401 answer from the API.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class AuthenticationRequired(ApiError):
    """The API answered 401; the context has been cleared."""


@dataclass
class AuthContext:
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def populate(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None


class TaskApiClient:
    """Thin wrapper around httpx.Client. Pass ``http`` to reuse a transport (tests use TestClient)."""

    def __init__(self, base_url: str = "http://localhost:8000", http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # --- plumbing ---

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            # page HTML d'un proxy, 500 en texte brut...
            if response.is_error:
                return {"message": response.text.strip() or response.reason_phrase}
            raise

    def _request(self, method: str, path: str, ctx: Optional[AuthContext] = None, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if ctx is not None and ctx.token:
            headers["Authorization"] = f"Bearer {ctx.token}"

        response = self._http.request(method, path, headers=headers, **kwargs)
        body = self._decode(response)

        if response.status_code == 401:
            if ctx is not None:
                ctx.clear()
            logger.warning(f"{method} {path} rejected, session cleared")
            raise AuthenticationRequired(401, body.get("message", "Unauthorized"))

        if response.is_error:
            raise ApiError(response.status_code, body.get("message", response.reason_phrase), body.get("errors"))

        return body

    # --- auth ---

    def register(self, username: str, email: str, password: str, first_name: str, last_name: str) -> AuthContext:
        body = self._request("POST", "/auth/register", json={
            "username": username,
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
        })
        return AuthContext(token=body["token"], user=body["user"])

    def login(self, email: str, password: str) -> AuthContext:
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return AuthContext(token=body["token"], user=body["user"])

    def resume(self, token: str) -> AuthContext:
        """Rebuild a context from a stored token by resolving the current user."""
        ctx = AuthContext(token=token)
        body = self._request("GET", "/auth/me", ctx)
        ctx.populate(token, body["user"])
        return ctx

    def logout(self, ctx: AuthContext) -> None:
        try:
            self._request("POST", "/auth/logout", ctx)
        finally:
            ctx.clear()

    # --- users ---

    def update_profile(self, ctx: AuthContext, **fields) -> Dict[str, Any]:
        body = self._request("PUT", "/users/profile", ctx, json=fields)
        ctx.user = body["user"]
        return body["user"]

    def change_password(self, ctx: AuthContext, current_password: str, new_password: str) -> str:
        body = self._request("PUT", "/users/change-password", ctx, json={
            "currentPassword": current_password,
            "newPassword": new_password,
        })
        return body["message"]

    def deactivate_account(self, ctx: AuthContext, password: str) -> str:
        body = self._request("DELETE", "/users/account", ctx, json={"password": password})
        ctx.clear()
        return body["message"]

    # --- tasks ---

    def list_tasks(self, ctx: AuthContext, **filters) -> Dict[str, Any]:
        params = {k: v for k, v in filters.items() if v is not None}
        return self._request("GET", "/tasks", ctx, params=params)

    def get_task(self, ctx: AuthContext, task_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/tasks/{task_id}", ctx)["task"]

    def create_task(self, ctx: AuthContext, **fields) -> Dict[str, Any]:
        return self._request("POST", "/tasks", ctx, json=fields)["task"]

    def update_task(self, ctx: AuthContext, task_id: int, **fields) -> Dict[str, Any]:
        return self._request("PUT", f"/tasks/{task_id}", ctx, json=fields)["task"]

    def delete_task(self, ctx: AuthContext, task_id: int) -> str:
        return self._request("DELETE", f"/tasks/{task_id}", ctx)["message"]

    def task_stats(self, ctx: AuthContext) -> Dict[str, Any]:
        return self._request("GET", "/tasks/stats/summary", ctx)["stats"]

# client/api_client.py
"""
タスク API のクライアント（httpx）

エラーはステータスコードごとの例外にして投げる。リトライはしない。
"""

import logging
import os
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
import pydantic
from dotenv import load_dotenv

from auth.security import AUTH_HEADER
from schemas.task import ScoredTaskResponse, TaskCreate, TaskResponse, TaskUpdate
from services.task_view import SortOrder, StatusFilter

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    """API エラーの基底クラス"""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Optional[dict] = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


class NotFoundError(ApiError):
    pass


class UnauthorizedError(ApiError):
    pass


class ValidationError(ApiError):
    """入力エラー（クライアント側のチェック、400 / 422）"""


class ServerError(ApiError):
    """5xx またはサーバーに接続できない"""


def _error_for_status(status_code: int):
    if status_code == 404:
        return NotFoundError
    if status_code == 401:
        return UnauthorizedError
    if status_code in (400, 422):
        return ValidationError
    if status_code >= 500:
        return ServerError
    return ApiError


class TodoApiClient:
    """
    タスク API クライアント
    トークンはインスタンスに持つ（グローバルには置かない）

    使い方:
        api = TodoApiClient("http://localhost:8000")
        api.login("me@example.com", "secret123")
        tasks = api.list_tasks()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        token: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url or os.getenv("TODO_API_URL", DEFAULT_BASE_URL)
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=self.base_url, timeout=timeout)
        self.token = token

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        if self._owns_http:
            self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _request(self, method: str, path: str, json: Optional[dict] = None, params: Optional[dict] = None) -> Any:
        headers = {AUTH_HEADER: self.token} if self.token else {}
        try:
            response = self._http.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise ServerError(f"{method} {path} failed: {e}") from e

        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {"detail": response.text}
        detail = body.get("detail") if isinstance(body, dict) else None
        message = detail if isinstance(detail, str) else f"{method} {path} returned {response.status_code}"

        logger.debug("%s %s -> %s %s", method, path, response.status_code, message)
        raise _error_for_status(response.status_code)(message, response.status_code, body)

    # --- 認証 ---

    def register(self, email: str, password: str) -> str:
        data = self._request("POST", "/api/auth/register", json={"email": email, "password": password})
        self.token = data["token"]
        return self.token

    def login(self, email: str, password: str) -> str:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    # --- タスク ---

    def list_tasks(
        self,
        status: StatusFilter = StatusFilter.ALL,
        query: Optional[str] = None,
        sort: SortOrder = SortOrder.SMART,
    ) -> List[ScoredTaskResponse]:
        """自分のタスクをサーバーのスコア順で取得する"""
        params: Dict[str, str] = {}
        if StatusFilter(status) != StatusFilter.ALL:
            params["status"] = StatusFilter(status).value
        if query:
            params["q"] = query
        if SortOrder(sort) != SortOrder.SMART:
            params["sort"] = SortOrder(sort).value

        data = self._request("GET", "/api/tasks", params=params or None)
        return [ScoredTaskResponse.model_validate(item) for item in data]

    def get_task(self, task_id: UUID) -> TaskResponse:
        return TaskResponse.model_validate(self._request("GET", f"/api/tasks/{task_id}"))

    def create_task(self, title: str, **fields: Any) -> TaskResponse:
        try:
            payload = TaskCreate(title=title, **fields).model_dump(mode="json", exclude_unset=True)
        except pydantic.ValidationError as e:
            raise ValidationError(str(e)) from e
        return TaskResponse.model_validate(self._request("POST", "/api/tasks", json=payload))

    def update_task(self, task_id: UUID, **changes: Any) -> TaskResponse:
        try:
            payload = TaskUpdate(**changes).model_dump(mode="json", exclude_unset=True)
        except pydantic.ValidationError as e:
            raise ValidationError(str(e)) from e
        return TaskResponse.model_validate(self._request("PUT", f"/api/tasks/{task_id}", json=payload))

    def delete_task(self, task_id: UUID) -> dict:
        return self._request("DELETE", f"/api/tasks/{task_id}")

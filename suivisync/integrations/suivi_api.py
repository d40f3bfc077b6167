"""Suivi API integration for suivisync."""

import asyncio
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests

from suivisync.config import SUIVI_API_BASE_URL, SUIVI_API_TIMEOUT_SEC, SUIVI_API_TOKEN
from suivisync.integrations.remote import RemoteServiceError
from suivisync.models.task import Task, TaskUpdate
from suivisync.models.task_factory import normalize_task

logger = logging.getLogger(__name__)


def _error_detail(response: Optional[requests.Response]) -> str:
    if response is None:
        return "no response"
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {response.status_code}"


class SuiviApiClient:
    """Client for the Suivi task API.

    The HTTP calls are blocking (`requests`); the async methods that make up
    the RemoteTaskService contract run them in a worker thread so the event
    loop is never blocked.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize Suivi API client.

        Args:
            base_url: API root. If None, reads SUIVI_API_BASE_URL.
            api_token: Bearer token. If None, reads SUIVI_API_TOKEN.
                The local mock backend accepts unauthenticated calls.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = (base_url or SUIVI_API_BASE_URL).rstrip("/")
        self.api_token = api_token or SUIVI_API_TOKEN
        self.timeout = timeout if timeout is not None else SUIVI_API_TIMEOUT_SEC

        self.headers = {"Content-Type": "application/json"}
        if self.api_token:
            self.headers["Authorization"] = f"Bearer {self.api_token}"

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> requests.Response:
        """Perform one HTTP call.

        Raises:
            RemoteServiceError: On transport failure or non-2xx status
        """
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, headers=self.headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise RemoteServiceError(
                f"{method} {path} failed: {_error_detail(e.response)}",
                status_code=status_code,
            ) from e
        except requests.RequestException as e:
            raise RemoteServiceError(f"{method} {path} failed: {e}") from e
        return response

    def _task_path(self, task_id: str) -> str:
        return f"/api/tasks/{quote(task_id, safe='')}"

    # Blocking API

    def fetch_tasks(self) -> List[Task]:
        """Fetch and normalize the full task collection."""
        body: Any = self._request("GET", "/api/tasks").json()
        if not isinstance(body, list):
            raise RemoteServiceError("GET /api/tasks returned a non-list body")
        tasks = [normalize_task(raw) for raw in body]
        logger.debug(f"Fetched {len(tasks)} tasks from {self.base_url}")
        return tasks

    def patch_task(self, task_id: str, fields: dict) -> Task:
        """PATCH a task and return the server's version of it."""
        body = self._request("PATCH", self._task_path(task_id), fields).json()
        return normalize_task(body)

    def remove_task(self, task_id: str) -> None:
        self._request("DELETE", self._task_path(task_id))

    # RemoteTaskService

    async def get_tasks(self) -> List[Task]:
        return await asyncio.to_thread(self.fetch_tasks)

    async def update_task_status(self, task_id: str, status: str) -> None:
        await asyncio.to_thread(self.patch_task, task_id, {"status": status})

    async def update_task(self, task_id: str, update: TaskUpdate) -> Task:
        return await asyncio.to_thread(self.patch_task, task_id, update.to_wire())

    async def delete_task(self, task_id: str) -> None:
        await asyncio.to_thread(self.remove_task, task_id)

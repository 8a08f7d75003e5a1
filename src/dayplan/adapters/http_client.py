"""HTTP planner adapter - requests client for a running dayplan server."""

import logging
from datetime import date
from typing import Any

import requests

from dayplan.core.categories import CategoryState
from dayplan.core.summary import DaySummary
from dayplan.core.tasks import Task
from dayplan.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class HttpPlannerClient:
    """
    dayplan API client.

    Implements Planner protocol. Maps 400/404 responses back to
    ValidationError/NotFoundError; anything else non-2xx raises
    requests.HTTPError. No business logic - just I/O.
    """

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Make an API request and return the decoded JSON body."""
        url = f"{self.base_url}/api{path}"
        logger.debug(f"{method} {url}")
        resp = self._session.request(method, url, timeout=self.timeout, **kwargs)

        if resp.status_code in (400, 404):
            try:
                message = resp.json().get("error", resp.text)
            except ValueError:
                message = resp.text
            if resp.status_code == 404:
                raise NotFoundError(message)
            raise ValidationError(message)

        resp.raise_for_status()
        return resp.json()

    def list_tasks(self, date_iso: str) -> list[Task]:
        data = self._request("GET", f"/tasks/{date_iso}")
        return [Task.from_dict(t) for t in data.get("tasks", [])]

    def all_tasks(self) -> dict[str, list[Task]]:
        data = self._request("GET", "/tasks")
        return {
            d: [Task.from_dict(t) for t in tasks]
            for d, tasks in data.get("tasksByDate", {}).items()
        }

    def create_task(self, date_iso: str, payload: dict) -> Task:
        return Task.from_dict(self._request("POST", f"/tasks/{date_iso}", json=payload))

    def patch_task(self, date_iso: str, payload: dict) -> Task:
        return Task.from_dict(self._request("PATCH", f"/tasks/{date_iso}", json=payload))

    def delete_task(self, date_iso: str, task_id: str) -> bool:
        data = self._request("DELETE", f"/tasks/{date_iso}", params={"id": task_id})
        return bool(data.get("ok"))

    def get_categories(self, date_iso: str) -> CategoryState:
        data = self._request("GET", f"/categories/{date_iso}")
        return CategoryState.from_dict(data.get("categories", {}))

    def set_category(self, date_iso: str, payload: dict) -> tuple[str, CategoryState]:
        data = self._request("PATCH", f"/categories/{date_iso}", json=payload)
        return data["date"], CategoryState.from_dict(data["categories"])

    def summarize(self, start: date, end: date) -> list[DaySummary]:
        data = self._request(
            "GET", "/summary", params={"start": start.isoformat(), "end": end.isoformat()}
        )
        return [
            DaySummary(
                date=date.fromisoformat(d["date"]),
                total=d["total"],
                completed=d["completed"],
                categories=CategoryState.from_dict(d["categories"]),
            )
            for d in data.get("days", [])
        ]

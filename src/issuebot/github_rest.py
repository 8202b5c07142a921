from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

from .config import DEFAULT_API_URL
from .errors import GitHubAPIError
from .logging import get_logger

USER_AGENT = "issuebot-rest/0.1.0"
HTTP_ERROR_STATUS = 400
PER_PAGE = 100


@dataclass(frozen=True)
class Issue:
    number: int
    title: str
    body: str | None
    url: str
    author: str

    @classmethod
    def from_api(cls, entry: Any) -> Issue:
        try:
            number = entry["number"]
            title = entry["title"]
            url = entry["url"]
            author = entry["user"]["login"]
        except (KeyError, TypeError) as exc:
            raise GitHubAPIError(f"Malformed issue payload: missing {exc}") from exc
        body = entry.get("body")
        if not isinstance(number, int) or not isinstance(title, str):
            raise GitHubAPIError(f"Malformed issue payload for #{number!r}")
        return cls(
            number=number,
            title=title,
            body=body if isinstance(body, str) else None,
            url=str(url),
            author=str(author),
        )


@dataclass
class GitHubRestClient:
    """Read-only REST client for the repository issues the state machine acts on."""

    repo: str
    token: str = ""
    base_url: str = DEFAULT_API_URL
    session: requests.Session | None = None
    timeout: float = 30
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.repo.count("/") != 1 or not all(self.repo.split("/")):
            raise ValueError(f"repo must look like 'owner/name', got {self.repo!r}")
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        if self.token:
            self._session.headers.setdefault("Authorization", f"Bearer {self.token}")

    def _request(
        self, method: str, path: str, *, params: dict[str, Any] | None = None
    ) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        get_logger().debug("github request", method=method, url=url, params=params)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise GitHubAPIError(f"GitHub API {method} {url} failed: {exc}") from exc
        if response.status_code >= HTTP_ERROR_STATUS:
            raise GitHubAPIError(
                f"GitHub API {method} {url} failed with {response.status_code}",
                status=response.status_code,
                response_text=response.text,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubAPIError(
                f"GitHub API {method} {url} returned invalid JSON",
                status=response.status_code,
                response_text=response.text,
            ) from exc

    def _paginate(self, path: str, *, params: dict[str, Any] | None = None) -> list[Any]:
        params = dict(params or {})
        per_page = params.setdefault("per_page", PER_PAGE)
        params.setdefault("page", 1)
        results: list[Any] = []
        while True:
            data = self._request("GET", path, params=dict(params))
            if not isinstance(data, list):
                raise GitHubAPIError(f"Expected a list from {path}, got {type(data).__name__}")
            results.extend(data)
            if len(data) < per_page:
                break
            params["page"] += 1
        return results

    def list_open_issues(self) -> list[Issue]:
        entries = self._paginate(f"/repos/{self.repo}/issues", params={"state": "open"})
        return [Issue.from_api(entry) for entry in entries]


__all__ = ["GitHubAPIError", "GitHubRestClient", "Issue"]

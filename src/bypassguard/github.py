from __future__ import annotations

import os
from typing import Any, Dict, Iterator, List, Optional, Protocol

import requests

from .errors import TransportError

GITHUB_API = os.environ.get("GITHUB_API_URL", "https://api.github.com")
DEFAULT_HTTP_TIMEOUT_SECONDS = float(os.environ.get("BYPASSGUARD_GITHUB_HTTP_TIMEOUT_SECONDS", "15"))
PER_PAGE = 100


class SourceControlService(Protocol):
    """Read-only lookups the audit needs from the source-control platform."""

    def get_branch_rules(self, owner: str, repo: str, branch: str) -> List[Dict[str, Any]]: ...

    def get_commit(self, owner: str, repo: str, sha: str) -> Dict[str, Any]: ...

    def get_pull_requests_for_commit(self, owner: str, repo: str, sha: str) -> List[Dict[str, Any]]: ...

    def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]: ...

    def get_check_runs(self, owner: str, repo: str, ref: str) -> List[Dict[str, Any]]: ...

    def get_pull_request_reviews(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]: ...


class GitHubClient:
    def __init__(self, token: str, api_url: str = GITHUB_API, timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "bypassguard-action",
        })

    def get_branch_rules(self, owner: str, repo: str, branch: str) -> List[Dict[str, Any]]:
        """Active rules that apply to a branch, from rulesets and classic protection."""
        return list(self._paginate(f"/repos/{owner}/{repo}/rules/branches/{branch}"))

    def get_commit(self, owner: str, repo: str, sha: str) -> Dict[str, Any]:
        return self._get_json(f"/repos/{owner}/{repo}/commits/{sha}")

    def get_pull_requests_for_commit(self, owner: str, repo: str, sha: str) -> List[Dict[str, Any]]:
        return list(self._paginate(f"/repos/{owner}/{repo}/commits/{sha}/pulls"))

    def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]:
        return self._get_json(f"/repos/{owner}/{repo}/pulls/{number}")

    def get_check_runs(self, owner: str, repo: str, ref: str) -> List[Dict[str, Any]]:
        return list(self._paginate(f"/repos/{owner}/{repo}/commits/{ref}/check-runs", item_key="check_runs"))

    def get_pull_request_reviews(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        return list(self._paginate(f"/repos/{owner}/{repo}/pulls/{number}/reviews"))

    # Internal helpers -------------------------------------------------

    def _get_json(self, path: str) -> Dict[str, Any]:
        return self._decode(self._request(f"{self.api_url}{path}"), path)

    def _paginate(self, path: str, item_key: Optional[str] = None) -> Iterator[Dict[str, Any]]:
        next_url: Optional[str] = f"{self.api_url}{path}"
        params: Optional[Dict[str, Any]] = {"per_page": PER_PAGE}
        while next_url:
            response = self._request(next_url, params=params)
            data = self._decode(response, path)
            items = data.get(item_key, []) if item_key else data
            if not isinstance(items, list):
                raise TransportError(f"GET {path} returned an unexpected payload")
            yield from items
            next_url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            params = None

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc
        if response.status_code >= 400:
            detail = response.text[:400]
            raise TransportError(
                f"GET {url} failed: {response.status_code} {detail}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _decode(response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"GET {path} returned invalid JSON") from exc

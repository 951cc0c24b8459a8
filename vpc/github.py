"""GitHub REST API v3 client for issue and commit comments."""

import httpx

from vpc.errors import CredentialsError
from vpc.models import Comment
from vpc.settings import VpcSettings

PER_PAGE = 100


class GitHubClient:
    def __init__(self, settings: VpcSettings) -> None:
        if not settings.github_token:
            raise CredentialsError("No GitHub credentials. Set VPC_GITHUB_TOKEN.")
        self._base_url = settings.github_api_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {settings.github_token.get_secret_value()}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    @staticmethod
    def _check(response: httpx.Response) -> None:
        if response.status_code == 401:
            raise CredentialsError("GitHub API returned 401. Check the github-token input.")
        response.raise_for_status()

    def _get_all(self, path: str) -> list[dict]:
        """GET every page of a list endpoint, following Link: rel="next"."""
        items: list[dict] = []
        url: str | None = f"{self._base_url}{path}"
        params: dict | None = {"per_page": str(PER_PAGE)}
        while url:
            response = httpx.get(url, headers=self._headers, params=params, timeout=30)
            self._check(response)
            items.extend(response.json())
            url = response.links.get("next", {}).get("url")
            params = None  # the next link already carries the query string
        return items

    def _send(self, method: str, path: str, body: dict) -> dict:
        response = httpx.request(
            method,
            f"{self._base_url}{path}",
            headers=self._headers,
            json=body,
            timeout=30,
        )
        self._check(response)
        return response.json()

    @staticmethod
    def _comments(nodes: list[dict]) -> list[Comment]:
        return [Comment(id=node["id"], body=node.get("body")) for node in nodes]

    # Issue (pull request conversation) comments

    def list_issue_comments(self, owner: str, repo: str, issue_number: int) -> list[Comment]:
        return self._comments(self._get_all(f"/repos/{owner}/{repo}/issues/{issue_number}/comments"))

    def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Comment:
        node = self._send("POST", f"/repos/{owner}/{repo}/issues/{issue_number}/comments", {"body": body})
        return Comment(id=node["id"], body=node.get("body"))

    def update_issue_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Comment:
        node = self._send("PATCH", f"/repos/{owner}/{repo}/issues/comments/{comment_id}", {"body": body})
        return Comment(id=node["id"], body=node.get("body"))

    # Commit comments

    def list_commit_comments(self, owner: str, repo: str, commit_sha: str) -> list[Comment]:
        return self._comments(self._get_all(f"/repos/{owner}/{repo}/commits/{commit_sha}/comments"))

    def create_commit_comment(self, owner: str, repo: str, commit_sha: str, body: str) -> Comment:
        node = self._send("POST", f"/repos/{owner}/{repo}/commits/{commit_sha}/comments", {"body": body})
        return Comment(id=node["id"], body=node.get("body"))

    def update_commit_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Comment:
        node = self._send("PATCH", f"/repos/{owner}/{repo}/comments/{comment_id}", {"body": body})
        return Comment(id=node["id"], body=node.get("body"))

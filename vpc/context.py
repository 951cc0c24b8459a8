"""Resolve the triggering GitHub event into a TriggerContext."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from vpc.errors import BranchUndefinedError
from vpc.models import EventKind, TriggerContext

BRANCH_PREFIX = "refs/heads/"


def load_event(path: str | None) -> dict:
    """Read the webhook payload GitHub wrote to GITHUB_EVENT_PATH."""
    if not path:
        return {}
    event_file = Path(path)
    if not event_file.exists():
        return {}
    return json.loads(event_file.read_text(encoding="utf-8"))


def resolve_branch(payload: Mapping, ref: str | None) -> str:
    pull_request = payload.get("pull_request")
    if pull_request:
        return pull_request["head"]["ref"]
    if ref:
        return ref.removeprefix(BRANCH_PREFIX)
    raise BranchUndefinedError("Branch name is undefined.")


def resolve_message(payload: Mapping, sha: str) -> str:
    """PR title, else the pushed head commit's message, else a synthesized one."""
    pull_request = payload.get("pull_request")
    if pull_request and pull_request.get("title"):
        return pull_request["title"]
    head_commit = payload.get("head_commit")
    if head_commit and head_commit.get("message"):
        return head_commit["message"]
    return f"Deploy {sha}"


def resolve_head_sha(payload: Mapping, sha: str) -> str:
    pull_request = payload.get("pull_request")
    if pull_request:
        return pull_request["head"]["sha"]
    return sha


def _issue_number(payload: Mapping) -> int | None:
    for key in ("issue", "pull_request"):
        node = payload.get(key)
        if node and node.get("number") is not None:
            return int(node["number"])
    if payload.get("number") is not None:
        return int(payload["number"])
    return None


def _split_repository(payload: Mapping, repository: str | None) -> tuple[str, str]:
    if repository and "/" in repository:
        owner, repo = repository.split("/", 1)
        return owner, repo
    repo_node = payload.get("repository") or {}
    owner_node = repo_node.get("owner") or {}
    return owner_node.get("login", ""), repo_node.get("name", "")


def resolve_context(
    event_name: str,
    payload: Mapping,
    sha: str,
    ref: str | None,
    actor: str,
    repository: str | None,
) -> TriggerContext:
    owner, repo = _split_repository(payload, repository)
    repo_id = (payload.get("repository") or {}).get("id")
    return TriggerContext(
        event_kind=EventKind.from_event_name(event_name),
        event_name=event_name,
        branch=resolve_branch(payload, ref),
        message=resolve_message(payload, sha),
        actor=actor,
        owner=owner,
        repo=repo,
        repo_id=repo_id,
        sha=sha,
        head_sha=resolve_head_sha(payload, sha),
        issue_number=_issue_number(payload),
    )


def context_from_env(environ: Mapping[str, str] | None = None) -> TriggerContext:
    """Build the context from the GITHUB_* variables the Actions runner sets."""
    env = os.environ if environ is None else environ
    payload = load_event(env.get("GITHUB_EVENT_PATH"))
    return resolve_context(
        event_name=env.get("GITHUB_EVENT_NAME", ""),
        payload=payload,
        sha=env.get("GITHUB_SHA", ""),
        ref=env.get("GITHUB_REF"),
        actor=env.get("GITHUB_ACTOR", ""),
        repository=env.get("GITHUB_REPOSITORY"),
    )

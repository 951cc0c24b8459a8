"""Shared test fixtures."""

import json
import os
from pathlib import Path

import pytest

import vpc.settings as settings_module
from vpc.models import DeploymentInfo, EventKind, TriggerContext
from vpc.settings import VpcSettings

PUSH_SHA = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"
PR_MERGE_SHA = "ffff000011112222333344445555666677778888"
PR_HEAD_SHA = "0123456789abcdef0123456789abcdef01234567"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep every test away from the real runner env, vpc.toml and .env."""
    for name in list(os.environ):
        if name.startswith(("VPC_", "GITHUB_", "VERCEL_")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_module, "CONFIG_PATH", tmp_path / "vpc.toml")
    settings_module._load_toml.cache_clear()
    yield
    settings_module._load_toml.cache_clear()


@pytest.fixture
def settings() -> VpcSettings:
    return VpcSettings(
        github_token="ghp_test",
        vercel_token="vc_test",
        vercel_org_id="team_123",
        vercel_project_id="prj_456",
    )  # type: ignore[call-arg]


@pytest.fixture
def push_payload() -> dict:
    return {
        "ref": "refs/heads/main",
        "after": PUSH_SHA,
        "head_commit": {"id": PUSH_SHA, "message": "Fix header layout"},
        "repository": {"id": 424242, "name": "site", "owner": {"login": "acme"}},
    }


@pytest.fixture
def pr_payload() -> dict:
    return {
        "action": "synchronize",
        "number": 7,
        "pull_request": {
            "number": 7,
            "title": "Add pricing page",
            "head": {"ref": "feature/pricing", "sha": PR_HEAD_SHA},
        },
        "repository": {"id": 424242, "name": "site", "owner": {"login": "acme"}},
    }


@pytest.fixture
def push_ctx() -> TriggerContext:
    return TriggerContext(
        event_kind=EventKind.PUSH,
        event_name="push",
        branch="main",
        message="Fix header layout",
        actor="octocat",
        owner="acme",
        repo="site",
        repo_id=424242,
        sha=PUSH_SHA,
        head_sha=PUSH_SHA,
    )


@pytest.fixture
def pr_ctx() -> TriggerContext:
    return TriggerContext(
        event_kind=EventKind.PULL_REQUEST,
        event_name="pull_request",
        branch="feature/pricing",
        message="Add pricing page",
        actor="octocat",
        owner="acme",
        repo="site",
        repo_id=424242,
        sha=PR_MERGE_SHA,
        head_sha=PR_HEAD_SHA,
        issue_number=7,
    )


@pytest.fixture
def deployment_info() -> DeploymentInfo:
    return DeploymentInfo(
        project_name="my-app",
        inspector_url="https://vercel.com/org/my-app/abc123",
        deployment_id="dpl_abc123",
    )


@pytest.fixture
def write_event(tmp_path: Path):
    """Write a webhook payload where GITHUB_EVENT_PATH would point."""

    def _write(payload: dict) -> Path:
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(payload))
        return event_path

    return _write

"""Tests for vpc.inspection using pytest-httpx."""

from unittest.mock import patch

import pytest
from pytest_httpx import HTTPXMock

from vpc.deploy import CommandResult
from vpc.errors import CredentialsError, DeploymentIdEmptyError, ProjectNameEmptyError
from vpc.inspection import (
    VercelClient,
    deployment_host,
    inspect_deployment,
    inspect_via_api,
    inspect_via_cli,
    parse_inspect_output,
)
from vpc.settings import VpcSettings

API = "https://api.vercel.com/v13/deployments"

_INSPECT_STDERR = """\
Vercel CLI 33.0.1
> Fetched deployment "my-app-abc123.vercel.app" in acme [1s]

  General

    id\t\tdpl_abc123
    name\tmy-app
    target\tpreview
    status\t● Ready
    url\t\thttps://my-app-abc123.vercel.app
"""


class TestDeploymentHost:
    def test_strips_scheme(self) -> None:
        assert deployment_host("https://my-app-abc123.vercel.app") == "my-app-abc123.vercel.app"

    def test_strips_trailing_slash_and_whitespace(self) -> None:
        assert deployment_host(" http://my-app.vercel.app/\n") == "my-app.vercel.app"

    def test_bare_host_unchanged(self) -> None:
        assert deployment_host("my-app.vercel.app") == "my-app.vercel.app"


class TestParseInspectOutput:
    def test_extracts_id_and_name(self) -> None:
        assert parse_inspect_output(_INSPECT_STDERR) == ("dpl_abc123", "my-app")

    def test_requires_indentation(self) -> None:
        assert parse_inspect_output("id dpl_x\nname app\n") == (None, None)

    def test_missing_fields(self) -> None:
        assert parse_inspect_output("  status  Ready\n") == (None, None)

    def test_first_match_wins(self) -> None:
        text = "  name   first\n  name   second\n"
        assert parse_inspect_output(text)[1] == "first"


class TestVercelClient:
    def test_sends_bearer_token(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/dpl_abc123", json={"id": "dpl_abc123"})
        VercelClient(settings).get_deployment("dpl_abc123")
        request = httpx_mock.get_requests()[0]
        assert request.headers["Authorization"] == "Bearer vc_test"

    def test_401_raises(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/dpl_abc123", status_code=401, json={"error": {}})
        with pytest.raises(CredentialsError, match="401"):
            VercelClient(settings).get_deployment("dpl_abc123")

    def test_no_token_raises(self) -> None:
        with pytest.raises(CredentialsError):
            VercelClient(VpcSettings())


class TestInspectViaApi:
    def test_reads_name_and_inspector_url(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=f"{API}/my-app-abc123.vercel.app",
            json={
                "id": "dpl_abc123",
                "name": "my-app",
                "inspectorUrl": "https://vercel.com/org/my-app/abc123",
            },
        )
        info = inspect_via_api(VercelClient(settings), "https://my-app-abc123.vercel.app")
        assert info.project_name == "my-app"
        assert info.inspector_url == "https://vercel.com/org/my-app/abc123"
        assert info.deployment_id == "dpl_abc123"

    def test_missing_name_raises(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/x.vercel.app", json={"inspectorUrl": "https://vercel.com/i"})
        with pytest.raises(ProjectNameEmptyError, match="projectName is empty"):
            inspect_via_api(VercelClient(settings), "https://x.vercel.app")

    def test_blank_name_raises(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/x.vercel.app", json={"name": "  "})
        with pytest.raises(ProjectNameEmptyError):
            inspect_via_api(VercelClient(settings), "https://x.vercel.app")

    def test_missing_inspector_url_is_none(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/x.vercel.app", json={"name": "my-app"})
        info = inspect_via_api(VercelClient(settings), "https://x.vercel.app")
        assert info.inspector_url is None


class TestInspectViaCli:
    def test_scrapes_then_fetches_by_id(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/dpl_abc123", json={"inspectorUrl": "https://vercel.com/org/my-app/abc123"})
        fake = CommandResult(returncode=0, stdout="", stderr=_INSPECT_STDERR)
        with patch("vpc.inspection.run_command", return_value=fake) as run:
            info = inspect_via_cli(settings, VercelClient(settings), "https://my-app-abc123.vercel.app")

        assert run.call_args.args[0] == ["npx", "vercel", "inspect", "https://my-app-abc123.vercel.app", "-t", "vc_test"]
        assert info.project_name == "my-app"
        assert info.deployment_id == "dpl_abc123"
        assert info.inspector_url == "https://vercel.com/org/my-app/abc123"

    def test_ignores_stdout(self, settings: VpcSettings) -> None:
        fake = CommandResult(returncode=0, stdout=_INSPECT_STDERR, stderr="")
        with patch("vpc.inspection.run_command", return_value=fake):
            with pytest.raises(ProjectNameEmptyError):
                inspect_via_cli(settings, VercelClient(settings), "https://x.vercel.app")

    def test_missing_id_raises(self, settings: VpcSettings) -> None:
        fake = CommandResult(returncode=0, stdout="", stderr="    name   my-app\n")
        with patch("vpc.inspection.run_command", return_value=fake):
            with pytest.raises(DeploymentIdEmptyError, match="deploymentId is empty"):
                inspect_via_cli(settings, VercelClient(settings), "https://x.vercel.app")


class TestInspectDeployment:
    def test_api_is_default(self, settings: VpcSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/x.vercel.app", json={"name": "my-app"})
        with patch("vpc.inspection.run_command") as run:
            info = inspect_deployment(settings, VercelClient(settings), "https://x.vercel.app")
        run.assert_not_called()
        assert info.project_name == "my-app"

    def test_cli_strategy_warns(
        self, settings: VpcSettings, httpx_mock: HTTPXMock, capsys: pytest.CaptureFixture
    ) -> None:
        httpx_mock.add_response(url=f"{API}/dpl_abc123", json={})
        cli_settings = settings.model_copy(update={"inspect_strategy": "cli"})
        fake = CommandResult(returncode=0, stdout="", stderr=_INSPECT_STDERR)
        with patch("vpc.inspection.run_command", return_value=fake):
            info = inspect_deployment(cli_settings, VercelClient(cli_settings), "https://x.vercel.app")
        assert info.deployment_id == "dpl_abc123"
        assert "::warning::" in capsys.readouterr().out

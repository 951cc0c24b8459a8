"""Look up a deployment's project name and inspector URL."""

import re

import httpx

from vpc import actions
from vpc.deploy import run_command
from vpc.errors import CredentialsError, DeploymentIdEmptyError, ProjectNameEmptyError
from vpc.models import DeploymentInfo
from vpc.settings import VpcSettings

# `vercel inspect` prints an indented "  key    value" block to stderr.
_ID_RE = re.compile(r"^\s+id\s+(.+)$", re.MULTILINE)
_NAME_RE = re.compile(r"^\s+name\s+(.+)$", re.MULTILINE)


class VercelClient:
    def __init__(self, settings: VpcSettings) -> None:
        if not settings.vercel_token:
            raise CredentialsError("No Vercel credentials. Set VPC_VERCEL_TOKEN.")
        self._base_url = settings.vercel_api_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {settings.vercel_token.get_secret_value()}"}

    def get_deployment(self, id_or_host: str) -> dict:
        """GET /v13/deployments/{id_or_host}. Accepts a deployment id or its hostname."""
        response = httpx.get(
            f"{self._base_url}/v13/deployments/{id_or_host}",
            headers=self._headers,
            timeout=30,
        )
        if response.status_code == 401:
            raise CredentialsError("Vercel API returned 401. Check the vercel-token input.")
        response.raise_for_status()
        return response.json()


def deployment_host(url: str) -> str:
    """https://my-app-abc123.vercel.app/ -> my-app-abc123.vercel.app"""
    host = re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", "", url.strip())
    return host.rstrip("/")


def parse_inspect_output(text: str) -> tuple[str | None, str | None]:
    """Return (deployment_id, project_name) scraped from `vercel inspect` output."""
    id_match = _ID_RE.search(text)
    name_match = _NAME_RE.search(text)
    return (
        id_match.group(1).strip() if id_match else None,
        name_match.group(1).strip() if name_match else None,
    )


def _require_name(name: str | None) -> str:
    if not name or not name.strip():
        raise ProjectNameEmptyError("projectName is empty")
    return name.strip()


def inspect_via_api(client: VercelClient, deployment_url: str) -> DeploymentInfo:
    data = client.get_deployment(deployment_host(deployment_url))
    return DeploymentInfo(
        project_name=_require_name(data.get("name")),
        inspector_url=data.get("inspectorUrl"),
        deployment_id=data.get("id"),
    )


def inspect_via_cli(settings: VpcSettings, client: VercelClient, deployment_url: str) -> DeploymentInfo:
    """Scrape `vercel inspect`, then fetch the inspector URL by deployment id.

    Depends on the CLI's human-readable format; kept as a fallback for setups
    where the API cannot resolve deployments by hostname.
    """
    token = settings.vercel_token.get_secret_value() if settings.vercel_token else ""
    result = run_command([settings.runner, settings.deploy_cli, "inspect", deployment_url, "-t", token])
    deployment_id, name = parse_inspect_output(result.stderr)

    project_name = _require_name(name)
    if not deployment_id:
        raise DeploymentIdEmptyError("deploymentId is empty")

    data = client.get_deployment(deployment_id)
    return DeploymentInfo(
        project_name=project_name,
        inspector_url=data.get("inspectorUrl"),
        deployment_id=deployment_id,
    )


def inspect_deployment(settings: VpcSettings, client: VercelClient, deployment_url: str) -> DeploymentInfo:
    match settings.inspect_strategy:
        case "cli":
            actions.warning("inspect-strategy 'cli' scrapes unversioned CLI output and is deprecated; prefer 'api'")
            return inspect_via_cli(settings, client, deployment_url)
        case _:
            return inspect_via_api(client, deployment_url)

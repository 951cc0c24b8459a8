"""Run the Vercel CLI deploy and capture the deployment URL it prints."""

import subprocess
import threading
from typing import IO

from pydantic import BaseModel, ConfigDict

from vpc import actions
from vpc.errors import PreviewUrlEmptyError
from vpc.models import DeploymentResult, TriggerContext
from vpc.settings import VpcSettings

OUTPUT_NAME = "preview-url"


class CommandResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    returncode: int
    stdout: str
    stderr: str


def _pump(stream: IO[str], chunks: list[str]) -> None:
    for line in stream:
        chunks.append(line)
        actions.info(line.rstrip("\n"))
    stream.close()


def run_command(args: list[str]) -> CommandResult:
    """Run args, echoing stdout and stderr to the log line by line as they arrive."""
    proc = subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    out: list[str] = []
    err: list[str] = []
    # One reader per pipe so a full stderr buffer can't block stdout.
    readers = [
        threading.Thread(target=_pump, args=(proc.stdout, out), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, err), daemon=True),
    ]
    for reader in readers:
        reader.start()
    returncode = proc.wait()
    for reader in readers:
        reader.join()
    return CommandResult(returncode=returncode, stdout="".join(out), stderr="".join(err))


def _metadata(ctx: TriggerContext) -> list[tuple[str, str]]:
    repo_id = "" if ctx.repo_id is None else str(ctx.repo_id)
    # githubOrg/githubRepo/githubRepoId repeat githubCommit* on purpose: Vercel reads both spellings.
    return [
        ("githubCommitAuthorName", ctx.actor),
        ("githubCommitMessage", ctx.message),
        ("githubCommitOrg", ctx.owner),
        ("githubCommitRef", ctx.branch),
        ("githubCommitRepo", ctx.repo),
        ("githubCommitRepoId", repo_id),
        ("githubCommitSha", ctx.sha),
        ("githubDeployment", "1"),
        ("githubOrg", ctx.owner),
        ("githubRepo", ctx.repo),
        ("githubRepoId", repo_id),
        ("githubCommitAuthorLogin", ctx.actor),
    ]


def build_deploy_args(settings: VpcSettings, ctx: TriggerContext) -> list[str]:
    """Return the full command line, runner included."""
    token = settings.vercel_token.get_secret_value() if settings.vercel_token else ""
    args = [settings.runner, settings.deploy_cli]
    if settings.is_production:
        args.append("--prod")
    args += ["-t", token]
    for key, value in _metadata(ctx):
        args += ["-m", f"{key}={value}"]
    return args


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def deploy(settings: VpcSettings, ctx: TriggerContext) -> DeploymentResult:
    """Deploy with the Vercel CLI and publish the resulting URL as a step output."""
    if settings.vercel_org_id:
        actions.export_variable("VERCEL_ORG_ID", settings.vercel_org_id)
    if settings.vercel_project_id:
        actions.export_variable("VERCEL_PROJECT_ID", settings.vercel_project_id)

    result = run_command(build_deploy_args(settings, ctx))
    if result.returncode != 0:
        actions.warning(f"{settings.deploy_cli} exited with code {result.returncode}")

    url = first_line(result.stdout)
    if not url:
        raise PreviewUrlEmptyError(f"{OUTPUT_NAME} is undefined")

    actions.set_output(OUTPUT_NAME, url)
    return DeploymentResult(url=url)

"""VPC CLI: deploy to Vercel and announce the preview on GitHub."""

from typing import Annotated, Literal

import typer
from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from vpc import actions
from vpc.comment import publish_comment
from vpc.context import context_from_env
from vpc.deploy import deploy
from vpc.github import GitHubClient
from vpc.inspection import VercelClient, inspect_deployment
from vpc.models import DeploymentInfo, DeploymentResult, PublishOutcome, TriggerContext
from vpc.settings import VpcSettings, get_settings

app = typer.Typer(help="vpc: Vercel deploy + GitHub preview comments", no_args_is_help=True)

ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Profile name from vpc.toml"),
]
StrategyOpt = Annotated[
    str | None,
    typer.Option("--inspect-strategy", help="How to look up the deployment: api (default) or cli"),
]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def announce(
    settings: VpcSettings,
    ctx: TriggerContext,
    skip_comment: bool = False,
) -> tuple[DeploymentResult, DeploymentInfo, PublishOutcome]:
    """Deploy, inspect the deployment, then publish the preview comment.

    Stages run strictly in order; the first failure aborts the rest. A deployment
    that succeeded is left in place when a later stage fails.
    """
    result = deploy(settings, ctx)
    info = inspect_deployment(settings, VercelClient(settings), result.url)
    actions.info(f"Deployment {info.deployment_id or result.url} belongs to project {info.project_name}")

    if skip_comment:
        actions.info("github comment skipped (--skip-comment).")
        return result, info, PublishOutcome(action="skipped")

    outcome = publish_comment(GitHubClient(settings), ctx, info, result.url)
    return result, info, outcome


def _strategy(value: str | None) -> Literal["api", "cli"] | None:
    if value is None:
        return None
    if value not in ("api", "cli"):
        actions.set_failed(f"Unknown inspect strategy '{value}'. Valid: api, cli")
        raise typer.Exit(1)
    return value  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("run")
def run_cmd(
    profile: ProfileOpt = None,
    production: Annotated[
        bool | None,
        typer.Option("--prod/--no-prod", help="Deploy to production (default: VPC_IS_PRODUCTION)"),
    ] = None,
    inspect_strategy: StrategyOpt = None,
    skip_comment: Annotated[bool, typer.Option("--skip-comment", help="Deploy and inspect only")] = False,
) -> None:
    """Deploy, look up the deployment, and upsert the preview comment."""
    try:
        settings = get_settings(
            profile=profile,
            require_github=not skip_comment,
            is_production=production,
            inspect_strategy=_strategy(inspect_strategy),
        )
        ctx = context_from_env()
        announce(settings, ctx, skip_comment=skip_comment)
    except typer.Exit:
        # Already reported.
        raise
    except Exception as exc:
        # Report like a failed Actions step: the message is the visible reason.
        actions.set_failed(str(exc))
        raise typer.Exit(1) from exc


@app.command("inspect")
def inspect_cmd(
    deployment_url: Annotated[str, typer.Argument(help="Deployment URL, e.g. https://my-app-abc123.vercel.app")],
    profile: ProfileOpt = None,
    inspect_strategy: StrategyOpt = None,
) -> None:
    """Show project name and inspector URL for a deployment."""
    settings = get_settings(profile=profile, require_github=False, inspect_strategy=_strategy(inspect_strategy))
    info = inspect_deployment(settings, VercelClient(settings), deployment_url)

    table = Table(title=deployment_url)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Project", escape(info.project_name))
    table.add_row("Deployment ID", info.deployment_id or "—")
    table.add_row("Inspector", info.inspector_url or "—")

    rprint(table)


@app.command("context")
def context_cmd() -> None:
    """Show how the current GitHub event resolves (branch, message, SHAs)."""
    ctx = context_from_env()

    table = Table(title="Trigger context")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Event", f"{ctx.event_name or '—'} ({ctx.event_kind.value})")
    table.add_row("Repository", f"{ctx.owner}/{ctx.repo}")
    table.add_row("Repository ID", str(ctx.repo_id) if ctx.repo_id is not None else "—")
    table.add_row("Branch", ctx.branch)
    table.add_row("Message", escape(ctx.message))
    table.add_row("Actor", ctx.actor)
    table.add_row("SHA", ctx.sha)
    table.add_row("Head SHA", ctx.head_sha)
    table.add_row("Issue", str(ctx.issue_number) if ctx.issue_number is not None else "—")

    rprint(table)


@app.command("config-show")
def config_show(profile: ProfileOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings(profile=profile, require_github=False)

    def mask(val: str | None) -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"...{val[-5:]}"

    table = Table(title="VPC Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("github_token", mask(settings.github_token.get_secret_value() if settings.github_token else None))
    table.add_row("vercel_token", mask(settings.vercel_token.get_secret_value() if settings.vercel_token else None))
    table.add_row("vercel_org_id", settings.vercel_org_id or "[dim](not set)[/dim]")
    table.add_row("vercel_project_id", settings.vercel_project_id or "[dim](not set)[/dim]")
    table.add_row("is_production", str(settings.is_production).lower())
    table.add_row("inspect_strategy", settings.inspect_strategy)
    table.add_row("command", f"{settings.runner} {settings.deploy_cli}")
    table.add_row("vercel_api_url", settings.vercel_api_url)
    table.add_row("github_api_url", settings.github_api_url)

    rprint(table)


if __name__ == "__main__":
    app()

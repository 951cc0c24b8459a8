"""Render the preview comment and create or update it on the triggering thread."""

from vpc import actions
from vpc.errors import VpcError
from vpc.github import GitHubClient
from vpc.models import (
    Comment,
    DeploymentInfo,
    EventKind,
    PublishOutcome,
    StatusComment,
    TriggerContext,
)


def build_title(project_name: str) -> str:
    return f"Deployment preview for _{project_name}_."


def build_body(title: str, info: DeploymentInfo, deployment_url: str, sha: str) -> str:
    inspector = info.inspector_url or "null"
    return f"""{title}

🔍 Inspect: {inspector}
✅ Preview: {deployment_url}

Built with commit {sha}."""


def render_comment(ctx: TriggerContext, info: DeploymentInfo, deployment_url: str) -> StatusComment:
    title = build_title(info.project_name)
    return StatusComment(title=title, body=build_body(title, info, deployment_url, ctx.head_sha))


def find_comment(comments: list[Comment], title: str) -> Comment | None:
    """First comment whose body contains title, or None."""
    for comment in comments:
        if comment.body and title in comment.body:
            return comment
    return None


def publish_comment(
    client: GitHubClient,
    ctx: TriggerContext,
    info: DeploymentInfo,
    deployment_url: str,
) -> PublishOutcome:
    """Update the existing preview comment for this project, or create one.

    Pull requests get an issue comment, pushes a commit comment on ctx.sha.
    Any other event is skipped. The body is always rebuilt from info.
    """
    status = render_comment(ctx, info, deployment_url)

    match ctx.event_kind:
        case EventKind.PULL_REQUEST:
            if ctx.issue_number is None:
                raise VpcError("pull_request event payload has no pull request number")
            existing = find_comment(client.list_issue_comments(ctx.owner, ctx.repo, ctx.issue_number), status.title)
            if existing:
                written = client.update_issue_comment(ctx.owner, ctx.repo, existing.id, status.body)
                action = "updated"
            else:
                written = client.create_issue_comment(ctx.owner, ctx.repo, ctx.issue_number, status.body)
                action = "created"
        case EventKind.PUSH:
            existing = find_comment(client.list_commit_comments(ctx.owner, ctx.repo, ctx.sha), status.title)
            if existing:
                written = client.update_commit_comment(ctx.owner, ctx.repo, existing.id, status.body)
                action = "updated"
            else:
                written = client.create_commit_comment(ctx.owner, ctx.repo, ctx.sha, status.body)
                action = "created"
        case _:
            actions.info("github comment skipped.")
            return PublishOutcome(action="skipped")

    actions.info(f"Preview comment {action} (id {written.id}).")
    return PublishOutcome(action=action, comment_id=written.id)

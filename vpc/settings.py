"""Settings resolution: CLI flags, then VPC_* env vars, then a named profile in vpc.toml."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import tomlkit
import typer
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vpc import actions

CONFIG_PATH = Path("vpc.toml")


class VpcSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VPC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    github_token: SecretStr | None = None
    vercel_token: SecretStr | None = None

    # Vercel project, exported as VERCEL_ORG_ID / VERCEL_PROJECT_ID for the CLI
    vercel_org_id: str | None = None
    vercel_project_id: str | None = None

    is_production: bool = False
    inspect_strategy: Literal["api", "cli"] = "api"  # "cli" scrapes `vercel inspect`, deprecated

    # Deploy tool invocation: <runner> <deploy_cli> ...
    runner: str = "npx"
    deploy_cli: str = "vercel"

    vercel_api_url: str = "https://api.vercel.com"
    github_api_url: str = "https://api.github.com"

    @field_validator("is_production", mode="before")
    @classmethod
    def _exact_true(cls, value: Any) -> Any:
        # Action inputs arrive as strings; only "true" turns production on.
        if isinstance(value, str):
            return value == "true"
        return value


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load vpc.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    with CONFIG_PATH.open() as fh:
        return tomlkit.load(fh)


def _list_profiles(config: Mapping) -> list[str]:
    # tomlkit Table implements MutableMapping but not dict, so check Mapping
    return [k for k, v in config.items() if isinstance(v, Mapping)]


def get_settings(
    profile: str | None = None,
    require_github: bool = True,
    **overrides: Any,
) -> VpcSettings:
    """Resolve the active profile and return a fully populated VpcSettings.

    Profile precedence (highest to lowest):
    1. profile argument (--profile CLI flag)
    2. VPC_PROFILE env var
    3. default_profile key in vpc.toml
    4. First profile defined in vpc.toml

    Field precedence: overrides (non-None CLI flags), then env vars and .env,
    then the profile table.
    """
    toml_config = _load_toml()

    active = (
        profile
        or os.environ.get("VPC_PROFILE")
        or toml_config.get("default_profile")
        or ((_profiles := _list_profiles(toml_config)) and _profiles[0] or None)
    )

    profile_defaults: dict = {}
    if active:
        if active in toml_config and isinstance(toml_config[active], Mapping):
            profile_defaults = toml_config[active].unwrap()
        else:
            profiles = _list_profiles(toml_config)
            actions.set_failed(f"Profile '{active}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}")
            raise typer.Exit(1)

    # Values the environment actually set win over the profile table.
    from_env = VpcSettings().model_dump(exclude_unset=True)
    cli = {k: v for k, v in overrides.items() if v is not None}
    settings = VpcSettings(**{**profile_defaults, **from_env, **cli})

    if not settings.vercel_token:
        actions.set_failed(
            "Missing Vercel credentials. Set VPC_VERCEL_TOKEN or "
            f"vercel_token in the [{active or 'profile'}] section of {CONFIG_PATH}"
        )
        raise typer.Exit(1)
    if require_github and not settings.github_token:
        actions.set_failed(
            "Missing GitHub credentials. Set VPC_GITHUB_TOKEN or "
            f"github_token in the [{active or 'profile'}] section of {CONFIG_PATH}"
        )
        raise typer.Exit(1)

    return settings

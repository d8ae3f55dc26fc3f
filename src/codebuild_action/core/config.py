"""Configuration for the CodeBuild run action.

GitHub Actions passes step inputs to the action as environment variables
named ``INPUT_<NAME>``, upper-cased with hyphens kept. The runner also
exports ``GITHUB_*`` context variables. Everything is read once into an
``ActionInputs`` snapshot so the rest of the action never touches
``os.environ`` directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "https://github.com"


def _input(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Return a step input, treating empty strings as unset."""
    val = environ.get(f"INPUT_{name.upper()}", "")
    val = val.strip()
    return val or None


def _as_bool(val: Optional[str]) -> bool:
    return (val or "").lower() in ("true", "1", "yes")


def _as_int(val: Optional[str], default: int, name: str) -> int:
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        logger.warning(f"Invalid int for {name}: {val}")
        return default


def _split_names(val: Optional[str]) -> list[str]:
    """Split a comma separated list, trimming whitespace and newlines."""
    if not val:
        return []
    return [name.strip() for name in val.split(",") if name.strip()]


@dataclass
class ActionInputs:
    """Merged action inputs and runner context."""

    project_name: Optional[str] = None
    buildspec_override: Optional[str] = None
    env_passthrough: list[str] = field(default_factory=list)
    compute_type_override: Optional[str] = None
    environment_type_override: Optional[str] = None
    image_override: Optional[str] = None
    disable_source_override: bool = False
    hide_cloudwatch_logs: bool = False

    # Polling
    update_interval: int = 30
    update_back_off: int = 15
    timeout: int = 0  # seconds, 0 waits forever
    log_level: str = "INFO"

    # Runner context
    repository: Optional[str] = None  # owner/repo
    sha: Optional[str] = None
    server_url: str = DEFAULT_SERVER_URL
    region: Optional[str] = None

    environ: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> ActionInputs:
        """Snapshot action inputs from an environment mapping."""
        defaults = cls()
        return cls(
            project_name=_input(environ, "project-name"),
            buildspec_override=_input(environ, "buildspec-override"),
            env_passthrough=_split_names(_input(environ, "env-passthrough")),
            compute_type_override=_input(environ, "compute-type-override"),
            environment_type_override=_input(environ, "environment-type-override"),
            image_override=_input(environ, "image-override"),
            disable_source_override=_as_bool(_input(environ, "disable-source-override")),
            hide_cloudwatch_logs=_as_bool(_input(environ, "hide-cloudwatch-logs")),
            update_interval=_as_int(
                _input(environ, "update-interval"), defaults.update_interval, "update-interval",
            ),
            update_back_off=_as_int(
                _input(environ, "update-back-off"), defaults.update_back_off, "update-back-off",
            ),
            timeout=_as_int(_input(environ, "timeout"), defaults.timeout, "timeout"),
            log_level=(_input(environ, "log-level") or defaults.log_level).upper(),
            repository=environ.get("GITHUB_REPOSITORY") or None,
            sha=environ.get("GITHUB_SHA") or None,
            server_url=(environ.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL).rstrip("/"),
            region=environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or None,
            environ=dict(environ),
        )


def validate_inputs(inputs: ActionInputs) -> list[str]:
    """Validate inputs and return list of issues (empty = valid)."""
    issues = []
    if not inputs.project_name:
        issues.append("project-name is required")
    if not inputs.disable_source_override:
        if not inputs.repository:
            issues.append("GITHUB_REPOSITORY is required for the source override")
        elif not all(inputs.repository.partition("/")[::2]):
            issues.append(f"GITHUB_REPOSITORY must be owner/repo, got {inputs.repository}")
        if not inputs.sha:
            issues.append("GITHUB_SHA is required for the source override")
    if inputs.update_interval < 1:
        issues.append(f"update-interval must be >= 1, got {inputs.update_interval}")
    if inputs.update_back_off < 0:
        issues.append(f"update-back-off must be >= 0, got {inputs.update_back_off}")
    if inputs.timeout < 0:
        issues.append(f"timeout must be >= 0, got {inputs.timeout}")
    if inputs.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        issues.append(f"Invalid log-level: {inputs.log_level}")
    return issues


def format_inputs(inputs: ActionInputs) -> str:
    """Format effective inputs for display."""
    lines = [
        "# Effective Inputs",
        "",
        "[build]",
        f"  project_name            = {inputs.project_name}",
        f"  buildspec_override      = {'set' if inputs.buildspec_override else 'none'}",
        f"  env_passthrough         = {inputs.env_passthrough}",
        f"  compute_type_override   = {inputs.compute_type_override}",
        f"  environment_type_override = {inputs.environment_type_override}",
        f"  image_override          = {inputs.image_override}",
        f"  disable_source_override = {inputs.disable_source_override}",
        "",
        "[polling]",
        f"  update_interval         = {inputs.update_interval}",
        f"  update_back_off         = {inputs.update_back_off}",
        f"  timeout                 = {inputs.timeout or 'none'}",
        f"  hide_cloudwatch_logs    = {inputs.hide_cloudwatch_logs}",
        "",
        "[context]",
        f"  repository              = {inputs.repository}",
        f"  sha                     = {inputs.sha}",
        f"  server_url              = {inputs.server_url}",
        f"  region                  = {inputs.region or 'default'}",
    ]
    return "\n".join(lines)

"""Turn action inputs into a StartBuild request, and parse log ARNs."""

from __future__ import annotations

import logging
from typing import Optional

from codebuild_action.core.config import ActionInputs
from codebuild_action.core.errors import ConfigError
from codebuild_action.core.models import BuildRequest, EnvironmentVariable, LogReference, SourceType

logger = logging.getLogger(__name__)

# Runner variables with this prefix are always forwarded to the build.
FORWARD_PREFIX = "GITHUB_"


def build_parameters(inputs: ActionInputs) -> BuildRequest:
    """Assemble the StartBuild request for the commit under test.

    Raises ConfigError if the project name is missing, or if the source
    override is enabled and the repository or commit is unknown.
    """
    if not inputs.project_name:
        raise ConfigError("project-name is required")

    request = BuildRequest(
        project_name=inputs.project_name,
        buildspec_override=inputs.buildspec_override,
        environment_variables_override=_environment_overrides(inputs),
        compute_type_override=inputs.compute_type_override,
        environment_type_override=inputs.environment_type_override,
        image_override=inputs.image_override,
    )

    if not inputs.disable_source_override:
        if not inputs.repository or not inputs.sha:
            raise ConfigError(
                "GITHUB_REPOSITORY and GITHUB_SHA are required to override the build source"
            )
        owner, _, repo = inputs.repository.partition("/")
        if not owner or not repo:
            raise ConfigError(
                f"GITHUB_REPOSITORY must be owner/repo, got {inputs.repository}"
            )
        request.source_version = inputs.sha
        request.source_type_override = SourceType.GITHUB
        request.source_location_override = f"{inputs.server_url}/{owner}/{repo}.git"

    return request


def _environment_overrides(inputs: ActionInputs) -> list[EnvironmentVariable]:
    """Prefix-matched runner variables first, then the passthrough list."""
    env = inputs.environ
    names = sorted(k for k in env if k.startswith(FORWARD_PREFIX))
    seen = set(names)

    for name in inputs.env_passthrough:
        if name in seen:
            continue
        if name not in env:
            logger.warning(f"Passthrough variable {name} is not set, skipping")
            continue
        names.append(name)
        seen.add(name)

    return [EnvironmentVariable(name=name, value=env[name]) for name in names]


def log_name(arn: Optional[str]) -> LogReference:
    """Extract the log group and stream from a CloudWatch Logs ARN.

    ``arn:aws:logs:<region>:<account>:log-group:<group>:log-stream:<stream>``

    CodeBuild reports ``null`` for both names before the log stream
    exists. Anything that cannot be parsed yields an empty reference.
    """
    if not arn:
        return LogReference()

    parts = arn.split(":")
    group = _segment_after(parts, "log-group")
    stream = _segment_after(parts, "log-stream")

    if group is None or stream is None:
        return LogReference()
    return LogReference(log_group_name=group, log_stream_name=stream)


def _segment_after(parts: list[str], marker: str) -> Optional[str]:
    try:
        value = parts[parts.index(marker) + 1]
    except (ValueError, IndexError):
        return None
    if not value or value == "null":
        return None
    return value

"""Core data models for the CodeBuild run action."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from codebuild_action.core.errors import ConfigError


class SourceType(Enum):
    """Source providers the action can point a build at."""
    GITHUB = "GITHUB"


class BuildStatus(Enum):
    """Terminal and in-flight statuses reported by CodeBuild."""
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    FAULT = "FAULT"
    TIMED_OUT = "TIMED_OUT"
    IN_PROGRESS = "IN_PROGRESS"
    STOPPED = "STOPPED"


@dataclass
class EnvironmentVariable:
    """A single environment variable override for the build container."""
    name: str
    value: str
    type: str = "PLAINTEXT"

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value, "type": self.type}


@dataclass
class LogReference:
    """CloudWatch log group and stream for a build.

    Both names are set or both are None.
    """
    log_group_name: Optional[str] = None
    log_stream_name: Optional[str] = None

    @property
    def available(self) -> bool:
        return bool(self.log_group_name and self.log_stream_name)


@dataclass
class BuildRequest:
    """Parameters for ``codebuild.start_build``."""
    project_name: str
    source_version: Optional[str] = None
    source_type_override: Optional[SourceType] = None
    source_location_override: Optional[str] = None
    buildspec_override: Optional[str] = None
    environment_variables_override: list[EnvironmentVariable] = field(default_factory=list)
    compute_type_override: Optional[str] = None
    environment_type_override: Optional[str] = None
    image_override: Optional[str] = None

    def __post_init__(self):
        if not self.project_name:
            raise ConfigError("project name is required")

    def to_api_params(self) -> dict:
        """Render the camelCase keyword arguments boto3 expects.

        Optional fields left as None are omitted, since boto3 rejects them.
        """
        params = {
            "projectName": self.project_name,
            "sourceVersion": self.source_version,
            "sourceTypeOverride": (
                self.source_type_override.value if self.source_type_override else None
            ),
            "sourceLocationOverride": self.source_location_override,
            "buildspecOverride": self.buildspec_override,
            "computeTypeOverride": self.compute_type_override,
            "environmentTypeOverride": self.environment_type_override,
            "imageOverride": self.image_override,
            "environmentVariablesOverride": [
                var.to_dict() for var in self.environment_variables_override
            ],
        }
        return {k: v for k, v in params.items() if v is not None}


def build_succeeded(build: dict) -> bool:
    """True if a build record reports SUCCEEDED."""
    return build.get("buildStatus") == BuildStatus.SUCCEEDED.value

"""Exceptions raised by the CodeBuild run action."""

from __future__ import annotations


class ActionError(Exception):
    """Base class for failures that should fail the workflow step."""


class ConfigError(ActionError):
    """Raised when required action inputs are missing or invalid."""


class BuildTimeoutError(ActionError):
    """Raised when a build does not finish within the configured timeout."""

    def __init__(self, build_id: str, timeout: float, elapsed: float):
        self.build_id = build_id
        self.timeout = timeout
        self.elapsed = elapsed
        super().__init__(
            f"Build {build_id} did not finish within the {timeout:.0f}s timeout "
            f"(waited {elapsed:.0f}s)"
        )

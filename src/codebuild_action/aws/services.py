"""AWS CodeBuild and CloudWatch Logs access for the action."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import boto3

from codebuild_action.core.models import BuildRequest

logger = logging.getLogger(__name__)


class BuildService(Protocol):
    """What the poll loop needs from AWS. Tests swap in a fake."""

    def get_build(self, build_id: str) -> dict:
        """Return the current build record for ``build_id``."""
        ...

    def get_log_events(
        self,
        log_group_name: str,
        log_stream_name: str,
        next_token: Optional[str] = None,
    ) -> dict:
        """Return a ``GetLogEvents`` response page."""
        ...


class CodeBuildService:
    """BuildService backed by boto3.

    Clients are created lazily so constructing the service never needs
    credentials.
    """

    def __init__(self, region: Optional[str] = None):
        self.region = region
        self._codebuild = None
        self._logs = None

    @property
    def codebuild(self):
        if self._codebuild is None:
            self._codebuild = boto3.client("codebuild", region_name=self.region)
        return self._codebuild

    @property
    def logs(self):
        if self._logs is None:
            self._logs = boto3.client("logs", region_name=self.region)
        return self._logs

    def start_build(self, request: BuildRequest) -> dict:
        """Start a build and return its initial record."""
        response = self.codebuild.start_build(**request.to_api_params())
        build = response["build"]
        logger.info(f"Started build: {build['id']}")
        return build

    def get_build(self, build_id: str) -> dict:
        response = self.codebuild.batch_get_builds(ids=[build_id])
        builds = response.get("builds", [])
        if not builds:
            raise LookupError(f"Build {build_id} not found")
        return builds[0]

    def get_log_events(
        self,
        log_group_name: str,
        log_stream_name: str,
        next_token: Optional[str] = None,
    ) -> dict:
        kwargs = {
            "logGroupName": log_group_name,
            "logStreamName": log_stream_name,
            "startFromHead": True,
        }
        if next_token:
            kwargs["nextToken"] = next_token
        return self.logs.get_log_events(**kwargs)

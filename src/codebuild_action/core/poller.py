"""Poll a running build until it finishes, relaying its log output.

A build counts as complete only when CodeBuild reports an ``endTime`` and
CloudWatch has no further log events for it. Log events can still
arrive after ``endTime`` is set.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Callable, Optional

from botocore.exceptions import ClientError

from codebuild_action.aws.services import BuildService
from codebuild_action.core.errors import BuildTimeoutError
from codebuild_action.core.params import log_name

logger = logging.getLogger(__name__)

THROTTLING_CODES = ("ThrottlingException", "TooManyRequestsException")


def write_log_line(message: str) -> None:
    """Default sink for build log events: raw lines on stdout."""
    sys.stdout.write(message + "\n")
    sys.stdout.flush()


def _is_throttling(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in THROTTLING_CODES


class BuildPoller:
    """Waits for a build to reach its end time with no pending log events.

    ``sleep`` and ``clock`` are injectable so tests can drive the loop
    without real delays.
    """

    def __init__(
        self,
        service: BuildService,
        interval: float = 30,
        back_off: float = 15,
        timeout: float = 0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        emit: Callable[[str], None] = write_log_line,
        hide_logs: bool = False,
    ):
        self.service = service
        self.interval = interval
        self.back_off = back_off
        self.timeout = timeout
        self.sleep = sleep
        self.clock = clock
        self.emit = emit
        self.hide_logs = hide_logs
        self.polls = 0

    def wait_for_build_end_time(self, build: dict) -> dict:
        """Poll until ``build`` completes and return the final build record.

        The log stream is read using the log ARN from the previous record,
        since CodeBuild only fills it in once the build container starts.

        Raises BuildTimeoutError when a timeout is configured and exceeded.
        """
        build_id = build["id"]
        started = self.clock()
        current = build
        next_token: Optional[str] = None

        while True:
            self._check_timeout(build_id, started)
            logs = log_name(current.get("logs", {}).get("cloudWatchLogsArn"))

            try:
                latest = self.service.get_build(build_id)
                events = []
                fetched_logs = False
                if logs.available and not self.hide_logs:
                    page = self.service.get_log_events(
                        logs.log_group_name, logs.log_stream_name, next_token,
                    )
                    fetched_logs = True
                    events = page.get("events", [])
                    next_token = page.get("nextForwardToken", next_token)
            except ClientError as e:
                if not _is_throttling(e):
                    raise
                self.interval += self.back_off
                logger.warning(
                    f"Throttled polling build {build_id}, "
                    f"backing off to {self.interval}s"
                )
                self.sleep(self.interval)
                continue

            self.polls += 1
            if latest.get("endTime") and (not fetched_logs or not events):
                logger.info(
                    f"Build {build_id} finished with status "
                    f"{latest.get('buildStatus')} after {self.polls} polls"
                )
                return latest

            for event in events:
                self.emit(event.get("message", "").rstrip())

            if not events:
                logger.debug(f"Build {build_id} status: {latest.get('buildStatus')}")
            current = latest
            self.sleep(self.interval)

    def _check_timeout(self, build_id: str, started: float) -> None:
        if not self.timeout:
            return
        elapsed = self.clock() - started
        if elapsed > self.timeout:
            raise BuildTimeoutError(build_id, self.timeout, elapsed)

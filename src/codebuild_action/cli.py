#!/usr/bin/env python3
"""CodeBuild Run Action: main entry point.

Starts an AWS CodeBuild build for the commit under test, streams its
CloudWatch logs into the job log, and fails the step unless the build
succeeds.

Usage:
    codebuild-run-action              # Start the build and wait for it
    codebuild-run-action --dry-run    # Print the StartBuild parameters only
    python main.py [--dry-run]        # Same, from a source checkout

Inputs are read from the environment the way GitHub Actions provides them
(INPUT_PROJECT-NAME, INPUT_BUILDSPEC-OVERRIDE, INPUT_ENV-PASSTHROUGH, ...).
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Mapping, Optional

from codebuild_action.aws.services import CodeBuildService
from codebuild_action.core.config import ActionInputs, format_inputs, validate_inputs
from codebuild_action.core.errors import ActionError
from codebuild_action.core.models import build_succeeded
from codebuild_action.core.params import build_parameters
from codebuild_action.core.poller import BuildPoller
from codebuild_action.github_actions.commands import group, set_failed, set_output

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logging.getLogger("botocore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)
logger = logging.getLogger("codebuild-action")

BUILD_ID_OUTPUT = "aws-build-id"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Run an AWS CodeBuild build from a GitHub Actions job",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the StartBuild parameters and exit",
    )
    return parser.parse_args(argv)


def run_build(
    inputs: ActionInputs,
    service: CodeBuildService,
    environ: Optional[Mapping[str, str]] = None,
) -> dict:
    """Start the build, wait for it, and return the final build record."""
    request = build_parameters(inputs)
    build = service.start_build(request)
    set_output(BUILD_ID_OUTPUT, build["id"], environ)

    poller = BuildPoller(
        service,
        interval=inputs.update_interval,
        back_off=inputs.update_back_off,
        timeout=inputs.timeout,
        hide_logs=inputs.hide_cloudwatch_logs,
    )
    with group(f"CodeBuild logs: {build['id']}"):
        return poller.wait_for_build_end_time(build)


def main(
    argv: Optional[list[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    service: Optional[CodeBuildService] = None,
) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)
    environ = os.environ if environ is None else environ
    inputs = ActionInputs.from_env(environ)

    issues = validate_inputs(inputs)
    if issues:
        for issue in issues:
            logger.error(issue)
        set_failed("; ".join(issues))
        return 1

    logging.getLogger().setLevel(inputs.log_level)
    logger.debug(format_inputs(inputs))

    if args.dry_run:
        print(json.dumps(build_parameters(inputs).to_api_params(), indent=2))
        return 0

    service = service or CodeBuildService(region=inputs.region)
    try:
        build = run_build(inputs, service, environ)
    except ActionError as e:
        logger.error(str(e))
        set_failed(str(e))
        return 1

    status = build.get("buildStatus")
    if not build_succeeded(build):
        set_failed(f"Build status: {status}")
        return 1

    logger.info(f"Build {build['id']} status: {status}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

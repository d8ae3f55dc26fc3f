"""GitHub Actions runner integration.

Step outputs go to the file named by ``GITHUB_OUTPUT``; annotations and
log groups are workflow commands printed on stdout.
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional, TextIO

logger = logging.getLogger(__name__)


def _escape(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_output(
    name: str,
    value: str,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """Set a step output.

    Returns False when not running under a runner that provides
    ``GITHUB_OUTPUT``; the value is logged instead.
    """
    environ = os.environ if environ is None else environ
    path = environ.get("GITHUB_OUTPUT")
    if not path:
        logger.info(f"Output {name}={value} (GITHUB_OUTPUT not set)")
        return False

    with open(path, "a", encoding="utf-8") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{name}={value}\n")
    return True


def set_failed(message: str, stream: Optional[TextIO] = None) -> None:
    """Emit an error annotation. The caller decides the exit code."""
    stream = stream or sys.stdout
    stream.write(f"::error::{_escape(message)}\n")
    stream.flush()


@contextmanager
def group(title: str, stream: Optional[TextIO] = None) -> Iterator[None]:
    """Fold everything written inside the block into a collapsible log group."""
    stream = stream or sys.stdout
    stream.write(f"::group::{title}\n")
    stream.flush()
    try:
        yield
    finally:
        stream.write("::endgroup::\n")
        stream.flush()

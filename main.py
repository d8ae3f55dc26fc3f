#!/usr/bin/env python3
"""Run the CodeBuild action from a source checkout without installing it."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from codebuild_action.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())

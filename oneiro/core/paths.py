#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the Oneiro project.

The parsing core never touches the filesystem; these paths are only used by
the command-line front end for its log files.

The project structure:
    ROOT/
    ├── oneiro/        # Package code
    └── logs/          # Application logs (default LOG_DIR)

LOG_DIR can be redirected with the ONEIRO_LOG_DIR environment variable,
which is how installed copies avoid writing next to site-packages.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/oneiro/core/paths.py and navigates up
    the directory tree to find ROOT.

    Returns:
        Path object for project root
    """
    current_file = Path(__file__).resolve()

    # Navigate up: paths.py -> core/ -> oneiro/ -> ROOT/
    return current_file.parent.parent.parent


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "oneiro"

# ---- Logs ----
LOG_DIR = Path(os.environ.get("ONEIRO_LOG_DIR", str(ROOT / "logs")))

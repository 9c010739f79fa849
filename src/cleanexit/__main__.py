# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Entry point for `python -m cleanexit` and `cleanexit` console script."""

from __future__ import annotations

import sys


def main() -> None:
    """Run the cleanexit CLI."""
    try:
        from cleanexit.cli import cli
    except ImportError as e:
        if getattr(e, "name", None) in ("cleanexit.cli", "click"):
            print(
                "cleanexit CLI requires the 'cli' extra.\n"
                "Install it with: pip install cleanexit[cli]",
                file=sys.stderr,
            )
            sys.exit(1)
        raise
    cli()


if __name__ == "__main__":
    main()

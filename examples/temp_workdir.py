# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Remove a scratch directory however the process ends.

Demonstrates:
- Installing a cleanup handler that runs on exit, signals and uncaught exceptions
- Telling exit codes apart from signal names in the handler

Usage:
    python examples/temp_workdir.py          # exits normally
    python examples/temp_workdir.py crash    # raises, exits with status 1
    (press Ctrl+C while it runs to see "[ctrl-C]" and a SIGINT exit)
"""

import shutil
import sys
import tempfile
import time

import cleanexit

workdir = tempfile.mkdtemp(prefix="cleanexit-example-")


def remove_workdir(exit_code: int | None, signal_name: str | None) -> None:
    reason = f"signal {signal_name}" if signal_name else f"exit code {exit_code}"
    shutil.rmtree(workdir, ignore_errors=True)
    print(f"Removed {workdir} ({reason})")


def main() -> None:
    cleanexit.install(remove_workdir)
    print(f"Working in {workdir}")

    for step in range(5):
        print(f"step {step}")
        time.sleep(1)

    if sys.argv[1:] == ["crash"]:
        raise RuntimeError("something went wrong")


if __name__ == "__main__":
    main()

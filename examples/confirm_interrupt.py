# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Veto the first Ctrl+C and only stop on the second one.

Demonstrates:
- Returning Verdict.VETO from a handler to keep the process alive
- Stacking several handlers; every handler runs even after a veto
- Suppressing the default "[ctrl-C]" message

Usage:
    python examples/confirm_interrupt.py
"""

import time

import cleanexit
from cleanexit import TerminationMessages, Verdict

interrupts = 0


def confirm(exit_code: int | None, signal_name: str | None) -> Verdict | None:
    global interrupts
    if signal_name != "SIGINT":
        return None
    interrupts += 1
    if interrupts == 1:
        print("\nPress Ctrl+C again to stop.")
        return Verdict.VETO
    return Verdict.CONTINUE


def report(exit_code: int | None, signal_name: str | None) -> None:
    print(f"report: exit_code={exit_code} signal={signal_name}")


def main() -> None:
    cleanexit.install(confirm, TerminationMessages(on_signal_interrupt=""))
    cleanexit.install(report)

    print("Running; press Ctrl+C to stop.")
    while True:
        time.sleep(0.5)


if __name__ == "__main__":
    main()

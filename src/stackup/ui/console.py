"""Console output formatting utilities for stackup."""

from __future__ import annotations

import sys
from typing import Mapping, Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_section(self, title: str) -> None:
        """Print a section header."""
        print(f"\n==> {title}")

    def print_run_started(
        self,
        host: str,
        elevation: str,
        step_count: int,
    ) -> None:
        """Print run start information."""
        print("\nRUN STARTED")
        print(f"Host: {host}")
        print(f"Elevation: {elevation}")
        print(f"Steps: {step_count}")

    def print_command(self, line: str) -> None:
        print(f"$ {line}")

    def print_step_skipped(self, name: str) -> None:
        print("STATUS: skipped (already in place)")

    def print_step_applied(self, name: str) -> None:
        print("STATUS: applied")

    def print_failure(
        self,
        name: str,
        reason: str,
        exit_code: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        """
        Print failure message.

        Args:
            name: Step name
            reason: Failure reason/error message
            exit_code: Optional exit code
            hint: Optional hint for user
        """
        print(f"STEP FAILED: {name}")
        if exit_code is not None:
            print(f"Exit code: {exit_code}")
        if hint:
            print(f"Hint: {hint}")
        if self.debug:
            print(f"Error details: {reason}")
        else:
            first_line = reason.split("\n", 1)[0]
            print(f"Error: {first_line}")

    def print_plan_step(self, index: int, name: str) -> None:
        print(f"  {index:2d}. {name}")

    def print_results(self, results: Mapping[str, str]) -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for step, status in results.items():
            print(f"  {step}: {status.upper()}")

    def print_summary(
        self,
        db_name: str,
        db_user: str,
        domain: str,
        versions: Mapping[str, Optional[str]],
    ) -> None:
        """Print the closing banner of a successful run."""
        print("")
        print("=" * 60)
        print(" Bootstrap completed successfully!")
        print("=" * 60)
        print("  Apache   : running")
        print(f"  MySQL    : running  (db: {db_name}, user: {db_user})")
        print(f"  pipx     : {versions.get('pipx') or 'unknown'}")
        print(f"  Poetry   : {versions.get('poetry') or 'unknown'}")
        print(f"  OCI CLI  : {versions.get('oci') or 'installed, reload shell for PATH'}")
        print(f"  SSL      : configured for {domain}")
        print("")
        print("  Activate project venv:  source .venv/bin/activate")
        print("  Or run via Poetry:      poetry run <command>")
        print("  Add a dependency:       poetry add <package>")
        print("  Add a dev dependency:   poetry add --group dev <package>")
        print("=" * 60)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console

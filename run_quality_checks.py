#!/usr/bin/env python
"""Local quality checks and tests for mcusim.

Runs formatting, import ordering, lint, typing, dead-code, complexity and
test checks, optionally applying the automatic fixes black and isort offer.

Usage:
    python run_quality_checks.py                    # Run all checks (no fixes)
    python run_quality_checks.py --fix              # Run all checks + auto fixes
    python run_quality_checks.py --fix --skip lint  # Fix but skip linting
    python run_quality_checks.py --verbose          # Detailed output
"""

import argparse
import subprocess
import sys

PACKAGE_DIR = "mcusim"
TESTS_DIR = "tests"
DIRS_TO_CHECK = [PACKAGE_DIR, TESTS_DIR]


class CheckRunner:
    """Runs quality checks and tests with optional auto-fixes."""

    def __init__(self, fix: bool = False, verbose: bool = False, skip_checks: list[str] = None):
        self.fix = fix
        self.verbose = verbose
        self.skip_checks = skip_checks or []
        self.failed_checks = []
        self.passed_checks = []

    def run_command(self, key: str, cmd: list[str], name: str, show_output: bool = False) -> bool:
        """Run one tool and record whether it passed.

        Args:
            key: Short name used by --skip
            cmd: Command and arguments as list
            name: Friendly name for the summary
            show_output: Stream tool output even when it passes

        Returns:
            True if the command succeeded or was skipped
        """
        if key in self.skip_checks:
            print(f"[skip] {name}")
            return True

        print(f"\n{'=' * 70}\n[run ] {name}\n{'=' * 70}")

        try:
            if self.verbose or show_output:
                success = subprocess.run(cmd, check=False).returncode == 0
            else:
                result = subprocess.run(cmd, check=False, capture_output=True, text=True)
                success = result.returncode == 0
                if not success:
                    print(result.stdout)
                    print(result.stderr)
        except FileNotFoundError as exc:
            print(f"[fail] {exc}")
            print('       Install the tooling with: pip install -e ".[dev]"')
            self.failed_checks.append(name)
            return False

        if success:
            print(f"[ ok ] {name}")
            self.passed_checks.append(name)
        else:
            print(f"[fail] {name}")
            self.failed_checks.append(name)
        return success

    def check_black_formatting(self) -> bool:
        cmd = ["black", *DIRS_TO_CHECK] if self.fix else ["black", "--check", *DIRS_TO_CHECK]
        return self.run_command("formatting", cmd, "Black formatting")

    def check_isort_imports(self) -> bool:
        cmd = ["isort", *DIRS_TO_CHECK] if self.fix else ["isort", "--check-only", *DIRS_TO_CHECK]
        return self.run_command("imports", cmd, "isort import ordering")

    def check_pylint(self) -> bool:
        return self.run_command("lint", ["pylint", PACKAGE_DIR], "Pylint")

    def check_mypy(self) -> bool:
        return self.run_command("type", ["mypy", PACKAGE_DIR], "Mypy")

    def check_vulture(self) -> bool:
        return self.run_command("deadcode", ["vulture", PACKAGE_DIR], "Vulture dead code")

    def check_radon_complexity(self) -> bool:
        return self.run_command(
            "complexity", ["radon", "cc", PACKAGE_DIR, "-a"], "Radon complexity", show_output=True
        )

    def run_tests(self) -> bool:
        return self.run_command(
            "tests",
            ["pytest", f"--cov={PACKAGE_DIR}", "--cov-report=term-missing", TESTS_DIR],
            "Pytest + coverage",
            show_output=True,
        )

    def print_summary(self) -> None:
        print(f"\n{'=' * 70}\nSUMMARY\n{'=' * 70}")
        for check in self.passed_checks:
            print(f"  [ ok ] {check}")
        for check in self.failed_checks:
            print(f"  [fail] {check}")
        if not self.failed_checks:
            print("\nAll checks passed.")

    def run_all(self) -> int:
        """Run all checks in order.

        Returns:
            0 if all checks passed, non-zero otherwise
        """
        for check in (
            self.check_black_formatting,
            self.check_isort_imports,
            self.check_pylint,
            self.check_mypy,
            self.check_vulture,
            self.check_radon_complexity,
            self.run_tests,
        ):
            check()

        self.print_summary()
        return 0 if not self.failed_checks else 1


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Run mcusim quality checks and tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--fix",
        "--apply",
        action="store_true",
        dest="fix",
        help="Apply black/isort fixes instead of only checking",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Stream all tool output")
    parser.add_argument(
        "--skip",
        nargs="+",
        default=[],
        help="Checks to skip: formatting, imports, lint, type, deadcode, complexity, tests",
    )
    args = parser.parse_args()

    return CheckRunner(fix=args.fix, verbose=args.verbose, skip_checks=args.skip).run_all()


if __name__ == "__main__":
    sys.exit(main())

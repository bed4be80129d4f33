"""CLI test fixtures with automatic ANSI stripping."""

import json
import re
from typing import Any

import pytest
from typer.testing import CliRunner, Result

from episodeforge.cli.main import app


def strip_ansi_codes(text: str) -> str:
    """Strip ANSI escape sequences and spinner characters from text.

    Args:
        text: Text potentially containing ANSI escape codes and spinners

    Returns:
        Text with all ANSI escape sequences and spinner characters removed
    """
    text = re.sub(r"\x1b\[[0-9;]*[A-Za-z]", "", text)
    text = re.sub(r"\x1b\].*?\x07", "", text)
    return re.sub(r"[⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏]", "", text)


class CleanResult:
    """A wrapper around CliRunner Result that strips ANSI codes."""

    def __init__(self, result: Result):
        """Initialize with a CliRunner result."""
        self._result = result

    @property
    def exit_code(self) -> int:
        """Return the exit code from the wrapped result."""
        return self._result.exit_code

    @property
    def exception(self) -> BaseException | None:
        """Return any exception from the wrapped result."""
        return self._result.exception

    @property
    def output(self) -> str:
        """Return the cleaned output."""
        return strip_ansi_codes(self._result.output)

    @property
    def stdout(self) -> str:
        """Return the cleaned stdout."""
        return strip_ansi_codes(self._result.stdout)

    def __contains__(self, text: str) -> bool:
        """Check if text is in the cleaned output."""
        return text in self.output

    def assert_success(self) -> "CleanResult":
        """Assert that the command succeeded (exit code 0)."""
        assert self.exit_code == 0, (
            f"Command failed with exit code {self.exit_code}.\n"
            f"Output: {self.output}\nException: {self.exception!r}"
        )
        return self

    def assert_failure(self, exit_code: int | None = None) -> "CleanResult":
        """Assert that the command failed."""
        assert self.exit_code != 0, f"Command succeeded unexpectedly.\n{self.output}"
        if exit_code is not None:
            assert self.exit_code == exit_code, (
                f"Expected exit code {exit_code}, got {self.exit_code}.\n"
                f"Output: {self.output}"
            )
        return self

    def parse_json(self) -> Any:
        """Parse stdout as JSON."""
        try:
            return json.loads(self.stdout)
        except json.JSONDecodeError as e:
            raise AssertionError(
                f"Failed to parse output as JSON: {e}\nOutput: {self.stdout}"
            ) from e


class CleanCliRunner(CliRunner):
    """A CliRunner that returns CleanResult objects."""

    def invoke(self, *args, **kwargs) -> CleanResult:
        """Invoke a CLI command and return a CleanResult."""
        return CleanResult(super().invoke(*args, **kwargs))


@pytest.fixture
def clean_runner():
    """Create a CLI runner that strips ANSI codes from output."""
    return CleanCliRunner()


@pytest.fixture
def cli_invoke(clean_runner):
    """Invoke the episodeforge app with the given arguments."""

    def invoke(*args: str, **kwargs) -> CleanResult:
        return clean_runner.invoke(app, list(args), **kwargs)

    return invoke

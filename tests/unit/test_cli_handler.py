"""Tests for CLI error and success reporting."""

import io
import json

import pydantic
import pytest
import typer
from rich.console import Console

from episodeforge.cli.utils import CLIHandler, cli_command, error_label
from episodeforge.exceptions import (
    CollaboratorLoadError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)
from episodeforge.models import Episode


def capture_console():
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


class TestErrorLabel:
    """Test error headings."""

    @pytest.mark.parametrize(
        ("error", "label"),
        [
            (CollaboratorLoadError("x"), "Collaborator Error"),
            (ConfigurationError("x"), "Configuration Error"),
            (NotFoundError("x", entity="scene", entity_id="S9"), "Not Found"),
            (ValidationError("x"), "Validation Error"),
            (RuntimeError("x"), "Error"),
        ],
    )
    def test_labels(self, error, label):
        """Subclasses get their own heading before the generic one."""
        assert error_label(error) == label


class TestCLIHandler:
    """Test CLIHandler output."""

    def test_domain_error_with_hint(self):
        """Message and hint are printed and the command exits."""
        console, buffer = capture_console()

        with pytest.raises(typer.Exit) as exc_info:
            CLIHandler(console).handle_error(
                ValidationError("Unknown analyzer: x", hint="Pick another")
            )

        assert exc_info.value.exit_code == 1
        assert "Validation Error: Unknown analyzer: x" in buffer.getvalue()
        assert "Hint: Pick another" in buffer.getvalue()

    def test_invalid_model_data_is_summarised(self):
        """pydantic errors name the failing field instead of dumping a trace."""
        console, buffer = capture_console()
        with pytest.raises(pydantic.ValidationError) as validation:
            Episode.model_validate({"scenes": []})

        with pytest.raises(typer.Exit):
            CLIHandler(console).handle_error(validation.value)

        output = buffer.getvalue()
        assert "Invalid Data: 1 problem(s) in Episode; title:" in output
        assert "Hint: Check the field names" in output

    def test_json_error(self, capsys):
        """JSON mode prints an error response."""
        with pytest.raises(typer.Exit):
            CLIHandler().handle_error(
                RuntimeError("boom"), json_output=True, exit_code=2
            )

        assert json.loads(capsys.readouterr().out) == {
            "success": False,
            "code": 2,
            "error": "boom",
        }

    def test_json_success(self, capsys):
        """JSON success responses carry the data."""
        CLIHandler().handle_success("Done", {"n": 1}, json_output=True)

        data = json.loads(capsys.readouterr().out)
        assert data == {"success": True, "message": "Done", "data": {"n": 1}}


class TestCliCommand:
    """Test the cli_command decorator."""

    def test_sync_result_is_returned(self):
        """Plain functions run unchanged."""

        @cli_command
        def command(value):
            return value * 2

        assert command(21) == 42

    def test_coroutine_is_run(self):
        """Coroutine functions are run to completion."""

        @cli_command
        async def command(value):
            return value + 1

        assert command(1) == 2

    def test_errors_become_exit_code(self):
        """Exceptions are reported and turned into exit code 1."""

        @cli_command
        def command():
            raise NotFoundError("Scene 'S9' not found", entity="scene")

        with pytest.raises(typer.Exit) as exc_info:
            command()

        assert exc_info.value.exit_code == 1

    def test_keyboard_interrupt(self):
        """An interrupted command exits with 130."""

        @cli_command
        def command():
            raise KeyboardInterrupt

        with pytest.raises(typer.Exit) as exc_info:
            command()

        assert exc_info.value.exit_code == 130

"""Tests for custom exception classes."""

import pytest

from episodeforge.exceptions import (
    CollaboratorLoadError,
    ConfigurationError,
    EpisodeForgeError,
    GenerationError,
    NotFoundError,
    ValidationError,
    check_config_keys,
)


class TestEpisodeForgeError:
    """Test the base exception formatting."""

    def test_message_only(self):
        """Test basic error formatting."""
        assert str(EpisodeForgeError("boom")) == "Error: boom"

    def test_hint_and_details(self):
        """Test hint and details are rendered in order."""
        error = EpisodeForgeError("boom", hint="try again", details={"a": 1})

        assert str(error) == "Error: boom\nHint: try again\nDetails:\n  a: 1"

    def test_hierarchy(self):
        """Every domain error derives from the base class."""
        for cls in (ConfigurationError, ValidationError, CollaboratorLoadError):
            assert issubclass(cls, EpisodeForgeError)
        assert issubclass(CollaboratorLoadError, ConfigurationError)


class TestNotFoundError:
    """Test NotFoundError."""

    def test_entity_details(self):
        """Entity and id end up in the details."""
        error = NotFoundError("Scene not found", entity="scene", entity_id="S9")

        assert error.entity == "scene"
        assert error.details == {"entity": "scene", "id": "S9"}
        assert "S9" in str(error)

    def test_no_details(self):
        """Without entity information no details are shown."""
        error = NotFoundError("missing")

        assert error.details is None
        assert str(error) == "Error: missing"


class TestGenerationError:
    """Test GenerationError."""

    def test_original_error(self):
        """The collaborator failure is kept and summarized."""
        cause = TimeoutError("slow")
        error = GenerationError(
            "Generation failed",
            collaborator="script_generator",
            item_index=2,
            original_error=cause,
        )

        assert error.original_error is cause
        assert error.details == {
            "collaborator": "script_generator",
            "item_index": 2,
            "original_error": "TimeoutError: slow",
        }

    def test_item_index_zero_is_kept(self):
        """Index 0 is a valid item index."""
        assert GenerationError("x", item_index=0).details == {"item_index": 0}


class TestCheckConfigKeys:
    """Test config key checking."""

    @pytest.mark.parametrize(
        ("wrong", "right"),
        [
            ("bulk_delay", "bulk_item_delay_seconds"),
            ("max_prompt_length", "quality_oversized_threshold"),
            ("loglevel", "log_level"),
        ],
    )
    def test_common_mistakes(self, wrong, right):
        """Misspelled keys suggest the correct name."""
        with pytest.raises(ConfigurationError) as exc_info:
            check_config_keys({wrong: 1})

        assert exc_info.value.hint == f"Did you mean '{right}'?"

    def test_valid_keys(self):
        """Correct keys pass silently."""
        check_config_keys({"bulk_item_delay_seconds": 0.5, "log_level": "INFO"})

"""Custom exception hierarchy for episodeforge with helpful error messages."""

from __future__ import annotations

from typing import Any


class EpisodeForgeError(Exception):
    """Base exception with helpful formatting for all episodeforge errors.

    Provides structured error messages with hints and details to help users
    understand and fix problems.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class ConfigurationError(EpisodeForgeError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class ValidationError(EpisodeForgeError):
    """Malformed input to an operation; the operation is not attempted."""

    pass


class NotFoundError(EpisodeForgeError):
    """An operation referenced a scene, episode or category that does not exist."""

    def __init__(
        self,
        message: str,
        entity: str | None = None,
        entity_id: str | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize not-found error.

        Args:
            message: Error message
            entity: Kind of entity that was looked up (scene, episode, ...)
            entity_id: Identifier that could not be resolved
            hint: Optional hint for the caller
        """
        self.entity = entity
        self.entity_id = entity_id
        details: dict[str, Any] = {}
        if entity:
            details["entity"] = entity
        if entity_id is not None:
            details["id"] = entity_id
        super().__init__(message=message, hint=hint, details=details or None)


class GenerationError(EpisodeForgeError):
    """A collaborator call (generator, idea generator, store) failed."""

    def __init__(
        self,
        message: str,
        collaborator: str | None = None,
        item_index: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize generation error.

        Args:
            message: Error message
            collaborator: Name of the collaborator that failed
            item_index: Zero-based batch index of the failing item, if any
            original_error: The exception raised by the collaborator
        """
        self.collaborator = collaborator
        self.item_index = item_index
        self.original_error = original_error

        details: dict[str, Any] = {}
        if collaborator:
            details["collaborator"] = collaborator
        if item_index is not None:
            details["item_index"] = item_index
        if original_error is not None:
            details["original_error"] = (
                f"{type(original_error).__name__}: {original_error}"
            )
        super().__init__(message=message, details=details or None)


class CollaboratorLoadError(ConfigurationError):
    """A collaborator could not be imported from a ``module:attribute`` path."""

    pass


def check_config_keys(config_data: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config_data: Raw configuration dictionary loaded from a file

    Raises:
        ConfigurationError: If a well-known misspelled key is present
    """
    common_mistakes = {
        "bulk_delay": "bulk_item_delay_seconds",
        "item_delay": "bulk_item_delay_seconds",
        "oversized_threshold": "quality_oversized_threshold",
        "max_prompt_length": "quality_oversized_threshold",
        "loglevel": "log_level",
        "log-level": "log_level",
    }

    for wrong, correct in common_mistakes.items():
        if wrong in config_data:
            raise ConfigurationError(
                message=f"Unknown configuration key '{wrong}'",
                hint=f"Did you mean '{correct}'?",
                details={"found": wrong, "expected": correct},
            )

"""JSON output formatter for CLI."""

from __future__ import annotations

import json
from typing import Any

from episodeforge.exceptions import EpisodeForgeError


class JsonFormatter:
    """Writes models, batch reports and CLI responses as JSON."""

    def format(self, data: Any) -> str:
        """Format data as JSON.

        Models are dumped with the camelCase keys of the dashboard payloads.

        Args:
            data: Model, report or plain container to format

        Returns:
            JSON string
        """
        return json.dumps(self._to_jsonable(data), default=str, indent=2)

    def _to_jsonable(self, data: Any) -> Any:
        if hasattr(data, "to_payload"):
            return data.to_payload()
        if hasattr(data, "to_dict"):
            return data.to_dict()
        if isinstance(data, dict):
            return {key: self._to_jsonable(value) for key, value in data.items()}
        if isinstance(data, list | tuple):
            return [self._to_jsonable(item) for item in data]
        return data

    def format_success(self, message: str, data: Any = None) -> str:
        """Format a success response."""
        response: dict[str, Any] = {"success": True, "message": message}
        if data is not None:
            response["data"] = self._to_jsonable(data)
        return json.dumps(response, default=str, indent=2)

    def format_error_response(self, error: str | Exception, code: int = 1) -> str:
        """Format an error response.

        Args:
            error: Error message or exception
            code: Error code

        Returns:
            JSON string
        """
        response: dict[str, Any] = {"success": False, "code": code}
        if isinstance(error, EpisodeForgeError):
            response["error"] = error.message
            if error.hint:
                response["hint"] = error.hint
        else:
            response["error"] = str(error)
        return json.dumps(response, default=str, indent=2)

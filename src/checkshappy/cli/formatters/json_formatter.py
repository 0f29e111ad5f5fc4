"""JSON output formatter for CLI."""

from __future__ import annotations

import json
from typing import Any

from checkshappy.cli.formatters.base import OutputFormat, OutputFormatter
from checkshappy.exceptions import ChecksHappyError


def to_jsonable(data: Any) -> Any:
    """Convert engine results, models and collections of them to plain JSON."""
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    if isinstance(data, list | tuple):
        return [to_jsonable(item) for item in data]
    return data


class JsonFormatter(OutputFormatter[Any]):
    """Generic JSON formatter for CLI output."""

    def format(self, data: Any, format_type: OutputFormat = OutputFormat.JSON) -> str:  # noqa: ARG002
        """Format data as JSON.

        Args:
            data: Data to format
            format_type: Output format type (ignored, always JSON)

        Returns:
            JSON string
        """
        return json.dumps(to_jsonable(data), default=str, indent=2, ensure_ascii=False)

    def format_success(self, message: str, data: Any = None) -> str:
        """Format a success response.

        Args:
            message: Success message
            data: Optional additional data

        Returns:
            JSON string
        """
        response: dict[str, Any] = {"success": True, "message": message}
        if data is not None:
            response["data"] = to_jsonable(data)
        return json.dumps(response, default=str, indent=2, ensure_ascii=False)

    def format_error_response(self, error: str | Exception, code: int = 1) -> str:
        """Format an error response.

        Args:
            error: Error message or exception
            code: Error code

        Returns:
            JSON string
        """
        response: dict[str, Any] = {"success": False, "code": code}
        if isinstance(error, ChecksHappyError):
            response["error"] = error.message
            if error.hint:
                response["hint"] = error.hint
        else:
            response["error"] = str(error)
        return json.dumps(response, default=str, indent=2, ensure_ascii=False)

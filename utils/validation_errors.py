"""Flatten pydantic validation errors into field/message pairs."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part != "__root__"]
    return ".".join(parts) or "body"


def _clean_message(message: str) -> str:
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    return message


def collect_field_errors(error: PydanticValidationError) -> list[dict]:
    """
    List every offending field of a pydantic ValidationError.

    Returns:
        [{"field": "job_type", "message": "Input should be 'import' or 'export'"}, ...]
    """
    return [
        {
            "field": _loc_to_field(issue.get("loc", ())),
            "message": _clean_message(issue.get("msg", "Invalid input")),
        }
        for issue in error.errors()
    ]

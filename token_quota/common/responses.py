"""Standard API response envelope."""
from typing import Any


def success_response(message: str, data: Any | None = None) -> dict[str, Any]:
    """Create a success response. ``data`` is omitted when there is none."""
    response = {"success": True, "message": message}
    if data is not None:
        response["data"] = data
    return response


def error_response(message: str, error: str | None = None) -> dict[str, Any]:
    """Create an error response."""
    response = {"success": False, "message": message}
    if error:
        response["error"] = error
    return response

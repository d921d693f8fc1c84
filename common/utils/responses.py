"""
Response envelope for endpoints that don't return a resource model.
"""

from typing import Any, Optional, Dict


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Wrap ``data`` as ``{"success": true, "data": ...}``; omits empty parts."""
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return body

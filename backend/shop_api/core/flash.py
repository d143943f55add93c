"""
Flash messages

One-shot messages stored in the signed session cookie (SessionMiddleware)
and removed the first time they are read.

Usage:
    flash(request, "Password changed", "success")
    ...
    messages = get_flashed_messages(request)
    # [{"category": "success", "message": "Password changed"}]
"""
from typing import Dict, List, Optional

from fastapi import Request

FLASH_KEY = "_flashes"


def flash(request: Request, message: str, category: str = "info") -> None:
    """Queue a message for the next read"""
    flashes = request.session.get(FLASH_KEY, [])
    flashes.append({"category": category, "message": message})
    request.session[FLASH_KEY] = flashes


def get_flashed_messages(request: Request, category: Optional[str] = None) -> List[Dict[str, str]]:
    """
    Return queued messages and remove them from the session.

    With a category only those messages are consumed, the rest stay queued.
    """
    flashes = request.session.pop(FLASH_KEY, [])
    if category is None:
        return flashes

    selected = [item for item in flashes if item["category"] == category]
    remaining = [item for item in flashes if item["category"] != category]
    if remaining:
        request.session[FLASH_KEY] = remaining
    return selected

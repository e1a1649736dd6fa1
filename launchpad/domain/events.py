"""Domain events published to subscription channels."""
from __future__ import annotations

from typing import Any, Dict


class Events:
    """Event names, used as channel prefixes."""
    STARTUP_UPVOTED = "STARTUP_UPVOTED"
    COMMENT_ADDED = "COMMENT_ADDED"


def channel_name(event: str, key: Any = None) -> str:
    """Build a channel name.

    A filter key is embedded in the channel itself (``COMMENT_ADDED:5``) so a
    publish only reaches subscribers interested in that key.
    """
    if not event:
        raise ValueError("event name is required")
    if key is None or key == "":
        return event
    return f"{event}:{key}"


def startup_upvoted_payload(startup: Dict[str, Any]) -> Dict[str, Any]:
    return {"startupUpvoted": startup}


def comment_added_payload(comment: Dict[str, Any]) -> Dict[str, Any]:
    return {"commentAdded": comment}

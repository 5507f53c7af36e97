"""Rejection message rendering.

Templates use ``{name}`` placeholders. Unknown placeholders render as
their own key name instead of failing, so a typo in a custom message
degrades to readable text.

Examples:
    >>> render_message("cannot transit from {old} to {new}", {"old": "a", "new": "b"})
    'cannot transit from a to b'
    >>> render_message("{old} -> {nope}", {"old": "a"})
    'a -> nope'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from statetransit.config.settings import get_settings

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def display(value: Any) -> str:
    """Standard display form; ``None`` renders as the configured absent token."""
    if value is None:
        return get_settings().validator.absent_token
    return str(value)


def render_message(template: str, keys: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` placeholders in *template* from *keys*."""

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in keys:
            return key
        return display(keys[key])

    return _PLACEHOLDER.sub(_sub, template)

from __future__ import annotations

from typing import Optional

import bleach


def sanitize_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Strip markup and surrounding whitespace from user-supplied text."""
    if not text:
        return ""
    text = str(text).strip()
    text = bleach.clean(text, tags=[], strip=True).strip()
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text

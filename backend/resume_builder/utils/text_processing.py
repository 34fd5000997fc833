"""Text processing utilities."""
import re
from typing import Optional


def clean_text(text: str) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text.strip())


def truncate(text: Optional[str], limit: int = 200) -> str:
    """Shorten text for log details, marking the cut with an ellipsis."""
    text = clean_text(text or "")
    if len(text) <= limit:
        return text
    return text[:limit - 3].rstrip() + "..."

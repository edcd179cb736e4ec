from __future__ import annotations

import re
from typing import Tuple

TITLE_RE = re.compile(r"<title>(.*?)</title>", re.IGNORECASE)
DEFAULT_TITLE = "Window"


def split_content(content: str, default_title: str = DEFAULT_TITLE) -> Tuple[str, str]:
    """Split embedded <title>...</title> markup off the window body.

    Only the first title segment is used and removed; without one the
    content comes back unchanged under the default title.
    """
    match = TITLE_RE.search(content)
    if not match:
        return default_title, content
    return match.group(1), content[: match.start()] + content[match.end() :]

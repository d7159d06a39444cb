"""Title blacklist matching."""

from typing import Iterable, List, Optional


class Blacklist:
    """Case-insensitive substring blacklist for article titles."""

    def __init__(self, keywords: Iterable[str]) -> None:
        self.keywords: List[str] = [k.strip().lower() for k in keywords if k and k.strip()]

    def match(self, title: str) -> Optional[str]:
        """Return the first keyword contained in ``title``, or None."""
        title_lower = title.lower()
        for keyword in self.keywords:
            if keyword in title_lower:
                return keyword
        return None

    def is_blacklisted(self, title: str) -> bool:
        return self.match(title) is not None

    def __len__(self) -> int:
        return len(self.keywords)

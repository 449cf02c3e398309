from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Update:
    title: str
    timestamp: Optional[str] = None
    content: Optional[str] = None
    full_content: Optional[str] = None
    is_fallback_data: bool = False


class Fetcher:
    """Source of dashboard updates. Implementations never raise; failure is []."""

    name: str = "base"

    def fetch_primary(self) -> List[Update]:
        raise NotImplementedError

    def fetch_secondary(self) -> List[Update]:
        return []

    def fetch(self) -> List[Update]:
        return self.fetch_primary()

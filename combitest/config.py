"""Configuration for scenario expansion."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExpansionConfig:
    """Limits and formatting used while expanding scenarios."""

    # Optional upper bound on cases generated from one scenario; None means unbounded
    max_cases: Optional[int] = None

    # Joins path segments into a single test name
    path_separator: str = "::"

    def check_case_count(self, count: int) -> bool:
        """Return True when ``count`` cases fit within ``max_cases``."""
        return self.max_cases is None or count <= self.max_cases


# Global configuration instance
EXPANSION_CONFIG = ExpansionConfig()

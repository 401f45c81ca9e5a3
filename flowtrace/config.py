"""Configuration management for flowtrace.

Loads environment variables and provides centralized config access for the CLI.
The analysis core never reads configuration; everything it needs is passed in.
"""
import os
from typing import FrozenSet, Optional
from dotenv import find_dotenv, load_dotenv

__version__ = "0.3.0"

POLICY_CHOICES = ("leaves", "all")
SEED_CHOICES = ("all", "first")


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self):
        """Initialize config by loading the nearest .env file."""
        load_dotenv(find_dotenv(usecwd=True))
        self._validate()

    def _validate(self):
        """Validate environment values eagerly so bad settings fail at startup.

        Raises:
            ValueError: If a FLOWTRACE_* variable has an invalid value
        """
        policy = self.default_policy
        if policy is not None and policy not in POLICY_CHOICES:
            raise ValueError(
                f"FLOWTRACE_POLICY must be one of {', '.join(POLICY_CHOICES)}, got '{policy}'"
            )
        if self.default_seeding not in SEED_CHOICES:
            raise ValueError(
                f"FLOWTRACE_SEEDS must be one of {', '.join(SEED_CHOICES)}, got '{self.default_seeding}'"
            )
        # Property raises on its own for non-integers
        if self.workers < 1:
            raise ValueError(f"FLOWTRACE_WORKERS must be >= 1, got {self.workers}")

    @property
    def default_policy(self) -> Optional[str]:
        """Traversal policy used when --policy is not given.

        Returns:
            'leaves', 'all', or None when unset (the CLI then requires --policy)
        """
        value = os.getenv("FLOWTRACE_POLICY")
        return value.strip().lower() if value else None

    @property
    def default_seeding(self) -> str:
        return os.getenv("FLOWTRACE_SEEDS", "all").strip().lower()

    @property
    def workers(self) -> int:
        raw = os.getenv("FLOWTRACE_WORKERS", "1")
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"FLOWTRACE_WORKERS must be an integer, got '{raw}'") from None

    @property
    def excluded_dirs(self) -> Optional[FrozenSet[str]]:
        """Directory names to skip, replacing the enumerator defaults.

        Returns:
            Set of names, or None to keep the defaults
        """
        raw = os.getenv("FLOWTRACE_EXCLUDE_DIRS")
        if raw is None:
            return None
        return frozenset(part.strip() for part in raw.split(",") if part.strip())


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config():
    """Drop the cached Config so the next get_config() re-reads the environment."""
    global _config
    _config = None

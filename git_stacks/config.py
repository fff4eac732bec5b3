"""Configuration handling for git-stacks"""

from dataclasses import dataclass, field
from typing import Optional, List

from git_stacks.constants import DEFAULT_DEBOUNCE_MS, DEFAULT_REMOTE, TRUNK_CANDIDATES


@dataclass
class Config:
    """Configuration for git-stacks with validation."""

    # Trunk resolution
    remote_name: str = DEFAULT_REMOTE
    trunk_branch: Optional[str] = None  # Explicit override, None = auto-detect
    trunk_candidates: List[str] = field(default_factory=lambda: list(TRUNK_CANDIDATES))

    # Display
    declutter_trunk: bool = True  # Hide trunk history below the oldest interesting commit

    # Repository watching
    watch: bool = True
    debounce_ms: int = DEFAULT_DEBOUNCE_MS

    # Execution modes
    interactive: bool = True
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_remote_name()
        self._validate_trunk_branch()
        self._validate_trunk_candidates()
        self._validate_debounce_ms()

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_trunk_branch(self):
        """Normalize trunk_branch, treating blank values as unset."""
        if self.trunk_branch is not None:
            self.trunk_branch = self.trunk_branch.strip() or None

    def _validate_trunk_candidates(self):
        """Validate trunk_candidates list."""
        if not isinstance(self.trunk_candidates, list):
            raise ValueError("trunk_candidates must be a list")
        if not all(isinstance(name, str) and name for name in self.trunk_candidates):
            raise ValueError("trunk_candidates must contain non-empty branch names")

    def _validate_debounce_ms(self):
        """Validate debounce_ms is positive."""
        if self.debounce_ms <= 0:
            raise ValueError(f"debounce_ms must be positive, got {self.debounce_ms}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "remote_name": self.remote_name,
            "trunk_branch": self.trunk_branch,
            "trunk_candidates": self.trunk_candidates,
            "declutter_trunk": self.declutter_trunk,
            "watch": self.watch,
            "debounce_ms": self.debounce_ms,
            "interactive": self.interactive,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key, mirroring dict access."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "remote_name",
            "trunk_branch",
            "trunk_candidates",
            "declutter_trunk",
            "watch",
            "debounce_ms",
            "interactive",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

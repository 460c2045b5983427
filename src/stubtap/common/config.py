"""
StubTap Configuration

Dataclass-based settings for stub delivery, optionally loaded from YAML.
"""

import logging
from dataclasses import dataclass, fields
from typing import Dict, Any

import yaml

from ..stubs.errors import DEFAULT_UNMATCHED_MESSAGE


@dataclass
class StubConfig:
    """Configuration for stub registration and delivery behavior."""

    # Delivery pacing
    chunk_delay_ms: int = 10  # Pause after each streamed chunk

    # Registration
    auto_activate: bool = True  # Run the activation hook on first add_stub

    # Unmatched requests
    unmatched_message: str = DEFAULT_UNMATCHED_MESSAGE

    # Logging
    log_level: str = "warning"

    @property
    def chunk_delay_seconds(self) -> float:
        """Pacing delay in seconds."""
        return max(self.chunk_delay_ms, 0) / 1000.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StubConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'StubConfig':
        """Load config from YAML file."""
        with open(yaml_path, 'r') as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    def apply_logging(self) -> None:
        """Apply ``log_level`` to the package logger."""
        logging.getLogger("stubtap").setLevel(getattr(logging, self.log_level.upper()))

"""Tuning values for a Neon Drop session.

Everything that governs pacing and scoring lives in :class:`GameConfig`.  The
defaults reproduce the classic arcade feel: a one second drop interval that
shrinks by 90ms per level, a new level every 500 points and short pauses
between cascade steps so the player can follow a chain.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Immutable timing and scoring configuration."""

    base_drop_ms: int = 1000
    min_drop_ms: int = 100
    drop_step_ms: int = 90
    points_per_level: int = 500
    max_level: int = 10
    points_per_ball: int = 10
    # Pause while matched balls pop, then after gravity before the next scan.
    match_delay_ms: int = 350
    chain_delay_ms: int = 300
    queue_size: int = 3
    min_group: int = 4

    def __post_init__(self) -> None:
        if self.min_drop_ms <= 0 or self.base_drop_ms < self.min_drop_ms:
            raise ValueError("Drop interval bounds are inconsistent")
        if self.drop_step_ms < 0:
            raise ValueError("drop_step_ms must not be negative")
        if self.points_per_level <= 0 or self.max_level < 1:
            raise ValueError("Level progression must be positive")
        if self.match_delay_ms < 0 or self.chain_delay_ms < 0:
            raise ValueError("Delays must not be negative")
        if self.queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        if self.min_group < 2:
            raise ValueError("min_group must be at least 2")


DEFAULT_CONFIG = GameConfig()


__all__ = ["GameConfig", "DEFAULT_CONFIG"]

"""
Configuration of a game: the parameters of ``new_game`` and the user-facing settings.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from tilemerge.core.state import SpawnRule

# ##: Bounds of the user-facing settings.
MIN_SIZE, MAX_SIZE = 3, 6
MIN_TARGET, MAX_TARGET = 256, 8192


@dataclass
class GameConfig:
    """
    Parameters of a new game.

    Attributes
    ----------
    size : int
        Side of the square grid.
    target : int
        Tile value that wins the game.
    seed : int, optional
        Generator seed; the wall clock is used when omitted.
    best : int
        Best score carried over from previous games.
    spawn_rule : SpawnRule
        Probability of spawning a 2 rather than a 4.
    """

    size: int = 4  # 4x4 board
    target: int = 2048
    seed: Optional[int] = None
    best: int = 0
    spawn_rule: SpawnRule = field(default_factory=SpawnRule)

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f'size must be >= 1, got {self.size}')
        if self.target < 1:
            raise ValueError(f'target must be >= 1, got {self.target}')
        if self.best < 0:
            raise ValueError(f'best must be >= 0, got {self.best}')


def _clamp_int(value: Any, default: int, lower: int, upper: int) -> int:
    """
    Coerce a loosely typed value into an integer within bounds.

    Non-numeric values give ``default``.
    """
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return max(lower, min(upper, number))


@dataclass
class GameSettings:
    """
    Settings chosen by the player.

    Attributes
    ----------
    size : int
        Side of the grid, between 3 and 6.
    target : int
        Winning tile, between 256 and 8192.
    undo_enabled : bool
        Whether the one-step undo is offered.
    """

    size: int = 4
    target: int = 2048
    undo_enabled: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> 'GameSettings':
        """
        Build settings from loosely typed data, such as a decoded settings file.

        Parameters
        ----------
        data : Mapping, optional
            Raw values. Unknown keys are ignored.

        Returns
        -------
        GameSettings
            Settings with invalid values replaced by defaults and numbers clamped to their bounds.
        """
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            size=_clamp_int(data.get('size'), 4, MIN_SIZE, MAX_SIZE),
            target=_clamp_int(data.get('target'), 2048, MIN_TARGET, MAX_TARGET),
            undo_enabled=data.get('undo_enabled', data.get('undoEnabled')) is not False,
        )

    def to_config(self, seed: Optional[int] = None, best: int = 0, two_prob: float = 0.9) -> GameConfig:
        """Create the ``GameConfig`` of a new game played with these settings."""
        return GameConfig(size=self.size, target=self.target, seed=seed, best=best, spawn_rule=SpawnRule(two_prob))

"""Stateful merge puzzle game for scripts and agents."""

import logging
from typing import Any, Optional

from numpy import ndarray

from tilemerge.core.codec import deserialize, serialize
from tilemerge.core.config import GameSettings
from tilemerge.core.engine import new_game, plan_move, try_move, undo
from tilemerge.core.gamemove import DIRECTIONS, legal_directions
from tilemerge.core.state import Direction, GameState, MovePlan, SpawnRule

# ##>: Module logger.
_logger = logging.getLogger(__name__)


class TileMergeGame:
    """
    Merge puzzle game.

    This class keeps the current ``GameState`` and forwards every command to the pure engine functions. It
    accepts moves as ``Direction`` values, direction names or the integer codes of ``ACTIONS``.
    """

    # ##: Current game state.
    _current_state: Optional[GameState] = None
    _current_reward: int = 0
    _last_spawn: Optional[tuple[int, int]] = None

    # ##: All Actions.
    ACTIONS = {'left': 0, 'up': 1, 'right': 2, 'down': 3}

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        seed: Optional[int] = None,
        best: int = 0,
        spawn_rule: Optional[SpawnRule] = None,
    ):
        """
        Initialize the game.

        Parameters
        ----------
        settings : GameSettings, optional
            Board size, target and undo availability (default is a 4x4 board with target 2048).
        seed : int, optional
            Seed of the first game; the wall clock is used when omitted.
        best : int, optional
            Best score carried over from previous sessions (default is 0).
        spawn_rule : SpawnRule, optional
            Probability of spawning a 2 rather than a 4 (default is 0.9).
        """
        self.settings = settings or GameSettings()
        self._spawn_rule = spawn_rule or SpawnRule()
        self._best = best

        self.reset(seed=seed)

    @staticmethod
    def to_direction(action: Direction | str | int) -> Direction:
        """
        Convert an action into a ``Direction``.

        Raises
        ------
        ValueError
            If the action is not a known direction or code.
        """
        if isinstance(action, int) and not isinstance(action, bool):
            if not 0 <= action < len(DIRECTIONS):
                raise ValueError(f'unknown action code: {action}')
            return DIRECTIONS[action]
        return Direction.parse(action)

    @property
    def state(self) -> GameState:
        """Get the current game state."""
        return self._current_state

    @property
    def observation(self) -> ndarray:
        """Get the current board."""
        return self._current_state.grid

    @property
    def reward(self) -> int:
        """Get the score gained by the last move."""
        return self._current_reward

    @property
    def score(self) -> int:
        """Get the current score."""
        return self._current_state.score

    @property
    def last_spawn(self) -> Optional[tuple[int, int]]:
        """Get the cell filled after the last effective move."""
        return self._last_spawn

    @property
    def is_finished(self) -> bool:
        """
        Check if the game is finished.

        Returns
        -------
        bool
            True if the game is won or no move is possible.
        """
        return self._current_state.won or self._current_state.over

    @property
    def legal_actions(self) -> list[Direction]:
        """Get the directions that would change the board."""
        return legal_directions(self._current_state.grid)

    def reset(self, seed: Optional[int] = None) -> ndarray:
        """
        Start a new game with two random tiles.

        Parameters
        ----------
        seed : int, optional
            Random seed for reproducibility.

        Returns
        -------
        ndarray
            The new game board.

        Notes
        -----
        The best score of the previous game is carried over.
        """
        if self._current_state is not None:
            self._best = max(self._best, self._current_state.best)

        config = self.settings.to_config(seed=seed, best=self._best, two_prob=self._spawn_rule.two_prob)
        self._current_state = new_game(config)
        self._current_reward = 0
        self._last_spawn = None

        _logger.info(
            'New %dx%d game, target %d, seed %d', config.size, config.size, config.target, self._current_state.rng_seed
        )
        return self.observation

    def step(self, action: Direction | str | int) -> tuple[ndarray, int, bool]:
        """
        Apply the selected action to the board.

        Parameters
        ----------
        action : Direction, str or int
            The move to apply.

        Returns
        -------
        tuple[ndarray, int, bool]
            A tuple containing:
            - The updated game board (ndarray)
            - The score gained by this action (int)
            - Whether the game has finished after this action (bool)

        Notes
        -----
        A move that does not change the board has a reward of 0 and spawns nothing.
        """
        previous = self._current_state
        result = try_move(previous, self.to_direction(action), self._spawn_rule)

        self._current_state = result.state
        self._current_reward = result.state.score - previous.score if result.changed else 0
        self._last_spawn = result.spawn

        if result.changed and self.is_finished:
            _logger.info(
                'Game %s after %d moves with score %d',
                'won' if result.state.won else 'over',
                result.state.move_count,
                result.state.score,
            )
        return self.observation, self.reward, self.is_finished

    def plan(self, action: Direction | str | int) -> MovePlan:
        """Describe the tile movements of an action without applying it."""
        return plan_move(self._current_state, self.to_direction(action))

    def undo(self) -> bool:
        """
        Revert the last effective move.

        Returns
        -------
        bool
            True if a move was reverted. Always False when undo is disabled in the settings.
        """
        if not self.settings.undo_enabled:
            return False

        previous = self._current_state
        self._current_state = undo(previous)
        reverted = self._current_state is not previous
        if reverted:
            self._current_reward = 0
            self._last_spawn = None
        return reverted

    def save(self) -> dict[str, Any]:
        """Encode the current game for the persistence layer."""
        return serialize(self._current_state)

    def load(self, payload: Any) -> bool:
        """
        Restore a game encoded by ``save``.

        Returns
        -------
        bool
            True if the payload was valid. An invalid payload leaves the current game untouched.
        """
        state = deserialize(payload)
        if state is None:
            return False

        self._current_state = state
        self._current_reward = 0
        self._last_spawn = None
        self._best = max(self._best, state.best)
        return True

    def render(self) -> None:
        """
        Render the game board. This method prints the current state of the game board to the console.
        """
        for row in self._current_state.grid.tolist():
            print(' \t'.join(map(str, row)))

"""
Versioned transport format of a game state.

A state is encoded as ``{"v": 1, "state": {...}}`` with grids as lists of lists of integers. Decoding never
raises: a payload that cannot be trusted yields ``None`` and the caller starts a new game instead.
"""

import logging
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from tilemerge.core.grid import freeze, from_lists, to_lists
from tilemerge.core.rng import normalize_seed
from tilemerge.core.state import GameState, Snapshot

# ##>: Module logger.
_logger = logging.getLogger(__name__)

# ##: Current version of the envelope.
FORMAT_VERSION = 1

_MASK = 0xFFFFFFFF

# ##: Grid as sent over the wire: non-negative tiles that fit the int64 board.
Tile = Annotated[int, Field(strict=True, ge=0, lt=2**63)]
GridPayload = list[list[Tile]]


def _mask_rng(value: int) -> int:
    """Mask a generator state to 32 bits; zero becomes the zero-seed replacement."""
    return normalize_seed(value & _MASK)


def _check_square(grid: GridPayload, size: int) -> None:
    if len(grid) != size or any(len(row) != size for row in grid):
        raise ValueError(f'grid is not a {size}x{size} matrix')


class SnapshotPayload(BaseModel):
    """Undo snapshot inside a saved state."""

    model_config = ConfigDict(populate_by_name=True)

    grid: GridPayload
    score: StrictInt = 0
    rng_state: StrictInt = Field(0, alias='rngState', validate_default=True)

    @field_validator('rng_state')
    @classmethod
    def mask_rng_state(cls, value: int) -> int:
        return _mask_rng(value)


class StatePayload(BaseModel):
    """
    Game state as sent over the wire.

    Counters default to 0 and flags to False; generator fields are masked to unsigned 32 bits.
    """

    model_config = ConfigDict(populate_by_name=True)

    size: StrictInt = Field(ge=1)
    target: StrictInt = Field(ge=1)
    grid: GridPayload
    score: StrictInt = 0
    best: StrictInt = 0
    move_count: StrictInt = Field(0, alias='moveCount')
    won: StrictBool = False
    over: StrictBool = False
    rng_seed: StrictInt = Field(0, alias='rngSeed', validate_default=True)
    rng_state: StrictInt = Field(0, alias='rngState', validate_default=True)
    can_undo: StrictBool = Field(False, alias='canUndo')
    prev: Optional[SnapshotPayload] = None

    @field_validator('rng_seed', 'rng_state')
    @classmethod
    def mask_rng(cls, value: int) -> int:
        return _mask_rng(value)

    @model_validator(mode='after')
    def check_grids(self) -> 'StatePayload':
        _check_square(self.grid, self.size)
        if self.prev is not None:
            _check_square(self.prev.grid, self.size)
        return self


class SavePayload(BaseModel):
    """Versioned envelope."""

    v: StrictInt
    state: StatePayload

    @field_validator('v')
    @classmethod
    def check_version(cls, value: int) -> int:
        if value != FORMAT_VERSION:
            raise ValueError(f'unsupported version {value}')
        return value


def _to_payload(state: GameState) -> SavePayload:
    prev = None
    if state.prev is not None:
        prev = SnapshotPayload(
            grid=to_lists(state.prev.grid), score=int(state.prev.score), rng_state=int(state.prev.rng_state)
        )
    body = StatePayload(
        size=int(state.size),
        target=int(state.target),
        grid=to_lists(state.grid),
        score=int(state.score),
        best=int(state.best),
        move_count=int(state.move_count),
        won=bool(state.won),
        over=bool(state.over),
        rng_seed=int(state.rng_seed),
        rng_state=int(state.rng_state),
        can_undo=bool(state.can_undo),
        prev=prev,
    )
    return SavePayload(v=FORMAT_VERSION, state=body)


def _to_state(body: StatePayload) -> GameState:
    """
    Build a ``GameState`` from a validated payload.

    ``canUndo`` is only kept when a snapshot is present, and a snapshot is only kept when ``canUndo`` is set.
    """
    prev = None
    if body.can_undo and body.prev is not None:
        prev = Snapshot(grid=freeze(from_lists(body.prev.grid)), score=body.prev.score, rng_state=body.prev.rng_state)

    return GameState(
        size=body.size,
        target=body.target,
        grid=freeze(from_lists(body.grid)),
        score=body.score,
        best=body.best,
        move_count=body.move_count,
        won=body.won,
        over=body.over,
        rng_seed=body.rng_seed,
        rng_state=body.rng_state,
        can_undo=prev is not None,
        prev=prev,
    )


def serialize(state: GameState) -> dict[str, Any]:
    """
    Encode a state into plain Python data.

    Parameters
    ----------
    state : GameState
        The state to encode.

    Returns
    -------
    dict
        The versioned envelope, ready for ``json.dumps``. ``prev`` is omitted when there is no snapshot.
    """
    return _to_payload(state).model_dump(by_alias=True, exclude_none=True)


def deserialize(payload: Any) -> Optional[GameState]:
    """
    Decode a state produced by ``serialize``.

    Parameters
    ----------
    payload : Any
        Decoded data, usually the result of ``json.loads``.

    Returns
    -------
    GameState or None
        The restored state, or ``None`` when the payload has the wrong version, no ``state`` object, a grid
        that is not a square list of integer lists, or a non-integer ``size`` / ``target``.
    """
    try:
        return _to_state(SavePayload.model_validate(payload).state)
    except ValidationError as error:
        _logger.warning('Rejected saved state: %d validation error(s)', error.error_count())
        return None


def dumps(state: GameState) -> str:
    """Encode a state as JSON text."""
    return _to_payload(state).model_dump_json(by_alias=True, exclude_none=True)


def loads(text: str | bytes) -> Optional[GameState]:
    """
    Decode JSON text produced by ``dumps``.

    Returns ``None`` when the text is not valid JSON or not a valid state.
    """
    try:
        return _to_state(SavePayload.model_validate_json(text).state)
    except ValidationError as error:
        _logger.warning('Rejected saved state: %d validation error(s)', error.error_count())
        return None

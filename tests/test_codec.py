"""
Tests for the versioned state codec.
"""

import json
from unittest import TestCase, main

import numpy as np

from tilemerge.core.codec import deserialize, dumps, loads, serialize
from tilemerge.core.engine import new_game, try_move
from tilemerge.core.rng import ZERO_SEED_REPLACEMENT
from tilemerge.core.state import Direction


class TestSerialize(TestCase):
    """Encoding of a state."""

    def setUp(self):
        state = new_game(seed=2048)
        for direction in (Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN):
            state = try_move(state, direction).state
        self.state = state

    def test_envelope(self):
        payload = serialize(self.state)
        self.assertEqual(payload['v'], 1)
        body = payload['state']
        expected = {'size', 'target', 'grid', 'score', 'best', 'moveCount', 'won', 'over', 'rngSeed', 'rngState'}
        self.assertEqual(set(body), expected | {'canUndo', 'prev'})
        self.assertEqual(body['grid'], self.state.grid.tolist())
        self.assertEqual(set(body['prev']), {'grid', 'score', 'rngState'})

    def test_json_compatible(self):
        """The payload only holds plain Python values."""
        payload = serialize(self.state)
        self.assertEqual(json.loads(json.dumps(payload)), payload)
        self.assertIsInstance(payload['state']['grid'][0][0], int)

    def test_without_snapshot(self):
        payload = serialize(new_game(seed=1))
        self.assertNotIn('prev', payload['state'])
        self.assertFalse(payload['state']['canUndo'])

    def test_lossless(self):
        """Decoding an encoded state restores every field, including the undo snapshot."""
        restored = deserialize(serialize(self.state))
        np.testing.assert_array_equal(restored.grid, self.state.grid)
        np.testing.assert_array_equal(restored.prev.grid, self.state.prev.grid)
        fields = ('size', 'target', 'score', 'best', 'move_count', 'won', 'over', 'rng_seed', 'rng_state', 'can_undo')
        for name in fields:
            self.assertEqual(getattr(restored, name), getattr(self.state, name), name)
        self.assertEqual(restored.prev.score, self.state.prev.score)
        self.assertEqual(restored.prev.rng_state, self.state.prev.rng_state)

    def test_restored_game_continues_identically(self):
        restored = loads(dumps(self.state))
        original = try_move(self.state, Direction.LEFT)
        replayed = try_move(restored, Direction.LEFT)
        self.assertEqual(original.spawn, replayed.spawn)
        np.testing.assert_array_equal(original.state.grid, replayed.state.grid)


class TestDeserialize(TestCase):
    """Decoding of untrusted payloads."""

    def setUp(self):
        self.payload = serialize(new_game(seed=31))

    def test_rejected_payloads(self):
        """Bad payloads give None instead of raising."""
        cases = {
            'not a mapping': [],
            'none': None,
            'wrong version': {'v': 2, 'state': self.payload['state']},
            'boolean version': {'v': True, 'state': self.payload['state']},
            'string version': {'v': '1', 'state': self.payload['state']},
            'missing version': {'state': self.payload['state']},
            'missing state': {'v': 1},
            'state not an object': {'v': 1, 'state': 'grid'},
        }
        for name, payload in cases.items():
            with self.subTest(name):
                self.assertIsNone(deserialize(payload))

    def test_rejected_fields(self):
        for field, value in (
            ('grid', 'not a grid'),
            ('grid', [1, 2, 3]),
            ('grid', [[2, 0], [0, 0]]),
            ('grid', [[2, 0, 0, 0], [0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
            ('size', '4'),
            ('size', True),
            ('size', 0),
            ('target', None),
            ('grid', [[2.7, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
            ('grid', [[-2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
            ('won', 'false'),
            ('canUndo', 1),
            ('score', '12'),
        ):
            with self.subTest(field=field, value=value):
                body = dict(self.payload['state'], **{field: value})
                self.assertIsNone(deserialize({'v': 1, 'state': body}))

    def test_missing_field(self):
        for field in ('grid', 'size', 'target'):
            with self.subTest(field=field):
                body = dict(self.payload['state'])
                del body[field]
                self.assertIsNone(deserialize({'v': 1, 'state': body}))

    def test_defaults(self):
        """Optional counters default to 0 and flags to False."""
        body = {key: self.payload['state'][key] for key in ('size', 'target', 'grid', 'rngSeed', 'rngState')}
        state = deserialize({'v': 1, 'state': body})
        self.assertEqual((state.score, state.best, state.move_count), (0, 0, 0))
        self.assertFalse(state.won or state.over or state.can_undo)
        self.assertIsNone(state.prev)

    def test_rng_masking(self):
        """Generator fields are masked to 32 bits."""
        body = dict(self.payload['state'], rngSeed=2**32 + 5, rngState=-1)
        state = deserialize({'v': 1, 'state': body})
        self.assertEqual(state.rng_seed, 5)
        self.assertEqual(state.rng_state, 0xFFFFFFFF)

        body = dict(self.payload['state'], rngState=2**32)
        self.assertEqual(deserialize({'v': 1, 'state': body}).rng_state, ZERO_SEED_REPLACEMENT)

    def test_undo_flag_needs_snapshot(self):
        body = dict(self.payload['state'], canUndo=True)
        state = deserialize({'v': 1, 'state': body})
        self.assertFalse(state.can_undo)
        self.assertIsNone(state.prev)

    def test_decoded_grid_is_read_only(self):
        state = deserialize(self.payload)
        with self.assertRaises(ValueError):
            state.grid[0, 0] = 2

    def test_loads_invalid_json(self):
        self.assertIsNone(loads('{"v": 1, "state": '))
        self.assertIsNone(loads('[]'))
        self.assertIsNone(loads('{"v": true, "state": {"size": 1, "target": 2, "grid": [[2]]}}'))

    def test_loads_valid_json(self):
        state = loads('{"v": 1, "state": {"size": 1, "target": 2, "grid": [[2]], "won": true}}')
        self.assertEqual(state.grid.tolist(), [[2]])
        self.assertTrue(state.won)
        self.assertEqual(state.rng_state, ZERO_SEED_REPLACEMENT)


if __name__ == '__main__':
    main()

"""
Play a seeded random game and print every board.

The same seed always plays the same game.
"""

import logging
from argparse import ArgumentParser

from numpy.random import default_rng

from tilemerge.core.config import GameSettings
from tilemerge.envs import TileMergeGame


def main():
    parser = ArgumentParser(description='Play a random merge puzzle game')
    parser.add_argument('--seed', type=int, default=None, help='Seed of the game and of the random player')
    parser.add_argument('--size', type=int, default=4, help='Side of the board')
    parser.add_argument('--target', type=int, default=2048, help='Tile value that wins the game')
    parser.add_argument('--max-moves', type=int, default=10_000, help='Stop after this many moves')
    parser.add_argument('--quiet', action='store_true', help='Only print the final result')
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO, format='%(levelname)s %(message)s')

    settings = GameSettings.from_mapping({'size': args.size, 'target': args.target})
    env = TileMergeGame(settings=settings, seed=args.seed)
    player = default_rng(env.state.rng_seed)

    if not args.quiet:
        print('New game:')
        env.render()
        print('Start ...')

    done = False
    moves = 0
    while not done and moves < args.max_moves:
        legal = env.legal_actions
        action = legal[player.integers(len(legal))]
        _, reward, done = env.step(action)
        moves += 1

        if not args.quiet:
            print('Next Action: "{}"\n\nReward: {}'.format(action.value, reward))
            env.render()

    outcome = 'won' if env.state.won else 'over' if env.state.over else 'stopped'
    print(
        '\nTotal Moves: {}, Score: {}, Max tile: {}, Outcome: {}'.format(moves, env.score, env.state.max_tile, outcome)
    )


if __name__ == '__main__':
    main()

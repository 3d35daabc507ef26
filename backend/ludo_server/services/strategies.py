"""Token-choice policies for bot players."""
import random
from typing import List

from ludo_server.models import Player, Room, Token
from ludo_server.services.movement import resolve_move


class Strategy:
    name = 'base'

    def choose(self, room: Room, player: Player, roll: int, movable: List[Token]) -> Token:
        raise NotImplementedError


class RandomStrategy(Strategy):
    """Uniform pick among movable tokens; a fixed seed replays the same picks."""

    name = 'random'

    def __init__(self, seed=None):
        self._rng = random.Random(seed)

    def choose(self, room, player, roll, movable):
        return self._rng.choice(sorted(movable, key=lambda t: t.index))


class GreedyStrategy(Strategy):
    """Finish a token if possible, then capture, then leave the pool, then
    push the most advanced token. Ties go to the lowest token index."""

    name = 'greedy'

    def choose(self, room, player, roll, movable):
        def score(token):
            outcome = resolve_move(room, player, token.index, roll)
            return (
                outcome.finished,
                len(outcome.captures),
                outcome.left_pool,
                outcome.to_position,
                -token.index,
            )

        return max(movable, key=score)


STRATEGIES = {
    RandomStrategy.name: RandomStrategy,
    GreedyStrategy.name: GreedyStrategy,
}


def make_strategy(name: str, seed=None) -> Strategy:
    if name not in STRATEGIES:
        raise ValueError(f'unknown bot strategy: {name!r}')
    if name == RandomStrategy.name:
        return RandomStrategy(seed)
    return STRATEGIES[name]()

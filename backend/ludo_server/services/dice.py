import random
import threading

from ludo_server.services.movement import DIE_FACES


class Dice:
    """Uniform six-sided die. Seeded dice replay the same sequence."""

    def __init__(self, seed=None):
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def roll(self) -> int:
        with self._lock:
            return self._rng.randint(1, DIE_FACES)


class LoadedDice(Dice):
    """Plays back a fixed list of faces, then falls back to random rolls."""

    def __init__(self, faces, seed=None):
        super().__init__(seed)
        self._faces = list(faces)

    def push(self, *faces):
        self._faces.extend(faces)

    def roll(self) -> int:
        if self._faces:
            return self._faces.pop(0)
        return super().roll()

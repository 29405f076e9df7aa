# Emulated memory pool

import random
import logging as lg
from enum import Enum

from miniasm.common.vmconf import MAX_MEMORY_SIZE, WORD_BITS
from miniasm.common.errors import MemoryIndexError, MemoryLimitError


WORD_MASK = (1 << WORD_BITS) - 1
SIGN_BIT = 1 << (WORD_BITS - 1)


def wrap(value: int) -> int:
    ''' Two's complement wrap to a signed machine word '''
    value &= WORD_MASK
    return value - (1 << WORD_BITS) if value & SIGN_BIT else value


class FillPolicy(Enum):
    ZERO = 'zero'
    RANDOM = 'random'


class MemoryPool:
    fill: FillPolicy
    cells: list[int]

    def __init__(
        self,
        fill: FillPolicy = FillPolicy.RANDOM,
        size: int = 0,
        seed: int | None = None
    ):
        self.fill = fill
        self.rng = random.Random(seed)
        self.cells = []

        if size:
            self.resize(size)

    def __len__(self) -> int:
        return len(self.cells)

    def check(self, index: int):
        if not 0 <= index < len(self.cells):
            raise MemoryIndexError(f'Memory index error: {index} of {len(self.cells)}')

    def get(self, index: int) -> int:
        self.check(index)
        return self.cells[index]

    def set(self, index: int, value: int):
        self.check(index)
        self.cells[index] = wrap(value)

    __getitem__ = get
    __setitem__ = set

    def resize(self, size: int):
        if not 0 <= size <= MAX_MEMORY_SIZE:
            raise MemoryLimitError(f'Memory limit exceeded: {size}')

        lg.debug(f'Memory resize to {size} ({self.fill.value})')

        if self.fill == FillPolicy.ZERO:
            self.cells = [0] * size
        else:
            bits = self.rng.getrandbits
            self.cells = [wrap(bits(WORD_BITS)) for _ in range(size)]

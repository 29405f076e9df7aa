# type: ignore
import pytest

from miniasm.runtime.memory import MemoryPool, FillPolicy


@pytest.fixture
def zero_memory():
    yield MemoryPool(FillPolicy.ZERO, 16)


@pytest.fixture
def chain_memory():
    # Every cell points to the next one, the last one back to 0
    pool = MemoryPool(FillPolicy.ZERO, 5)

    for i in range(5):
        pool[i] = (i + 1) % 5

    yield pool

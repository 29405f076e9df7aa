import tomllib
import logging as lg
from pathlib import Path


MAX_MEMORY_SIZE = 10_000_000    # Cells
MAX_REFERENCE_DEPTH = 256       # Dereference hops per operand
MAX_INTEGER_LENGTH = 10         # Digits per literal
MAX_LEXEME_LENGTH = 4096
MAX_LINE_LENGTH = 2047
TIME_LIMIT = 50_000_000         # Cost units per run
WORD_BITS = 32


class Settings:
    friendly: bool          # Zero-filled memory instead of random
    seed: int | None        # Random fill seed
    time_limit: int

    # Key -> accepted TOML type
    KEYS = {'friendly': bool, 'seed': int, 'time_limit': int}

    def __init__(self):
        self.friendly = False
        self.seed = None
        self.time_limit = TIME_LIMIT

    def update(
        self,
        friendly: bool | None = None,
        seed: int | None = None,
        time_limit: int | None = None
    ):
        if friendly is not None:
            self.friendly = friendly

        if seed is not None:
            self.seed = seed

        if time_limit is not None:
            if time_limit < 0:
                raise UserWarning(f'Negative time limit {time_limit}')

            self.time_limit = time_limit

        return self


def load_settings(path: str | Path, settings: Settings | None = None) -> Settings:
    if isinstance(path, str):
        path = Path(path)

    if settings is None:
        settings = Settings()

    lg.debug(f'Loading settings from {path}')
    config = tomllib.loads(path.read_text())
    vm = config.get('vm', {})

    if not isinstance(vm, dict):
        raise UserWarning(f'Setting vm in {path} must be a table')

    for key in vm:
        if key not in Settings.KEYS:
            raise UserWarning(f'Unknown setting {key} in {path}')

        expected = Settings.KEYS[key]
        value = vm[key]

        # bool is an int subclass
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise UserWarning(f'Invalid setting {key} in {path}: {value!r}')

    return settings.update(**vm)

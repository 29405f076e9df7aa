import sys
import tomllib
import logging as lg
from pathlib import Path

import click

from miniasm.common.vmconf import Settings, load_settings
from miniasm.common.errors import ParseError, RuntimeFault, TimeLimitExceeded
import miniasm.asm.asm as asm
import miniasm.runtime.cpu as cpu


EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_RUNTIME_FAULT = 2
EXIT_TIME_LIMIT = 3
EXIT_KEYBOARD = 4
EXIT_CONFIG_ERROR = 5


def execute(source: str, settings: Settings | None = None) -> cpu.Program:
    program = asm.assemble(source, settings)

    try:
        elapsed = program.run()
        lg.info(f'Execution finished, elapsed {elapsed}')

    finally:
        program.debug_dump()

    return program


def fail(message: str, code: int):
    click.echo(f'(ERROR) {message}', err=True)
    sys.exit(code)


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--friendly', is_flag=True, help='Zero-filled memory')
@click.option('--seed', type=int, help='Seed for random memory fill')
@click.option('--time-limit', type=click.IntRange(min=0), help='Execution cost budget')
@click.option('-c', '--config', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('source', type=click.File('r'))
def run(
    verbose: bool,
    friendly: bool,
    seed: int | None,
    time_limit: int | None,
    config: Path | None,
    source
):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.WARNING)
    lg.info('MINIASM')

    try:
        settings = Settings()

        if config is not None:
            load_settings(config, settings)

        settings.update(friendly=friendly or None, seed=seed, time_limit=time_limit)
        execute(source.read(), settings)
        sys.exit(EXIT_OK)

    except (UserWarning, tomllib.TOMLDecodeError) as e:
        lg.info('Bad configuration')
        fail(str(e), EXIT_CONFIG_ERROR)

    except ParseError as e:
        lg.info('Halted on parse error')
        fail(str(e), EXIT_PARSE_ERROR)

    except TimeLimitExceeded as e:
        lg.info('Execution halted on time limit')
        fail(str(e), EXIT_TIME_LIMIT)

    except RuntimeFault as e:
        lg.info('Execution halted on fault')
        fail(str(e), EXIT_RUNTIME_FAULT)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)


if __name__ == '__main__':
    run()

import logging as lg
from pathlib import Path
from typing import TextIO

from miniasm.common.vmconf import MAX_LINE_LENGTH, Settings
from miniasm.common.errors import ParseError
from miniasm.runtime.cpu import Program
import miniasm.asm.parser as parser


def assemble(
    source: str,
    settings: Settings | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None
) -> Program:
    program = Program(settings, stdin=stdin, stdout=stdout)

    for number, line in enumerate(source.splitlines(), start=1):
        try:
            if len(line) > MAX_LINE_LENGTH:
                raise ParseError(f'Line too long: {len(line)} characters')

            instruction = parser.parse(line)

        except ParseError as e:
            raise e.at_line(number)

        if instruction is not None:
            program.append(instruction)

    lg.info(f'Assembled {len(program.instructions)} instructions')
    return program


def load_file(filepath: str | Path, settings: Settings | None = None, **streams) -> Program:
    if isinstance(filepath, str):
        filepath = Path(filepath)

    lg.debug(f'Loading file {filepath}')
    return assemble(filepath.read_text(), settings, **streams)

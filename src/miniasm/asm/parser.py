import logging as lg
from typing import Iterator

from miniasm.common.ops import Kind, Shape, MNEMONICS, RESERVED
from miniasm.common.vmconf import MAX_INTEGER_LENGTH
from miniasm.common.errors import ParseError
from miniasm.runtime.cpu import Value, Instruction
from miniasm.runtime.memory import wrap
from miniasm.asm.lexer import Token, TokenKind, tokenize


def strip_comment(tokens: list[Token]) -> list[Token]:
    for i, tok in enumerate(tokens):
        if tok.kind == TokenKind.COMMENT:
            return tokens[:i]

    return tokens


def read_value(stream: Iterator[Token]) -> Value:
    depth = 0

    for tok in stream:
        if tok.kind == TokenKind.STARS:
            depth += len(tok)
            continue

        if tok.kind != TokenKind.DIGITS:
            raise ParseError(f'Invalid value: {tok.text!r} at column {tok.start + 1}')

        if len(tok) > MAX_INTEGER_LENGTH:
            raise ParseError(f'Integer too long: {tok.text}')

        return Value(wrap(int(tok.text)), depth)

    raise ParseError('Unterminated value')


def read_args(stream: Iterator[Token], shape: Shape) -> tuple[Value, ...]:
    return tuple(read_value(stream) for _ in range(shape.arity()))


def parse_tokens(tokens: list[Token]) -> Instruction | None:
    tokens = strip_comment(tokens)

    if not tokens:
        return None

    head = tokens[0]
    mnemonic = head.text.upper()

    if head.kind != TokenKind.LETTERS:
        raise ParseError(f'Unknown instruction: {head.text}')

    if mnemonic in RESERVED:
        raise ParseError(f'Unsupported instruction: {mnemonic}')

    if mnemonic not in MNEMONICS:
        raise ParseError(f'Unknown instruction: {head.text}')

    (kind, shape) = MNEMONICS[mnemonic]

    # Bookmark form: NOP idx
    if kind == Kind.NOP and len(tokens) > 1:
        (kind, shape) = (Kind.NOP_MARK, Shape.INDEX)

    stream = iter(tokens[1:])
    args = read_args(stream, shape)
    extra = next(stream, None)

    if extra is not None:
        raise ParseError(f'Unexpected token: {extra.text!r} at column {extra.start + 1}')

    return Instruction(kind, args)


def parse(line: str) -> Instruction | None:
    instruction = parse_tokens(tokenize(line))

    if instruction is not None:
        lg.debug(f'Parsed {instruction}')

    return instruction

''' Line tokenizer '''

from dataclasses import dataclass
from enum import Enum

import pyparsing as pp

from miniasm.common.vmconf import MAX_LEXEME_LENGTH
from miniasm.common.errors import ParseError


STAR = '*'
COMMENT = '#'


class TokenKind(Enum):
    LETTERS = 'letters'
    DIGITS = 'digits'
    STARS = 'stars'
    COMMENT = 'comment'


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int

    def __len__(self) -> int:
        return len(self.text)


def g_token(expr: pp.ParserElement, kind: TokenKind) -> pp.ParserElement:
    return expr.set_parse_action(lambda s, loc, r: Token(kind, r[0], loc))


letters = g_token(pp.Word(pp.alphas), TokenKind.LETTERS)
digits = g_token(pp.Word(pp.nums), TokenKind.DIGITS)
stars = g_token(pp.Word(STAR), TokenKind.STARS)
comment = g_token(pp.Word(COMMENT), TokenKind.COMMENT)

# Characters outside these classes only separate tokens
token = (letters | digits | stars | comment).leave_whitespace()


def tokenize(line: str) -> list[Token]:
    tokens: list[Token] = []

    for (result, _, _) in token.scan_string(line):
        tok = result[0]

        if len(tok) > MAX_LEXEME_LENGTH:
            raise ParseError(f'Lexeme too long: {len(tok)} characters')

        tokens.append(tok)

    return tokens

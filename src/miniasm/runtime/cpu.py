import re
import sys
import logging as lg
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, TextIO

from miniasm.common.ops import Kind
from miniasm.common.vmconf import MAX_REFERENCE_DEPTH, WORD_BITS, Settings
from miniasm.common.errors import RuntimeFault, ReferenceOverflow, TimeLimitExceeded
from miniasm.runtime.memory import MemoryPool, FillPolicy, WORD_MASK, SIGN_BIT, wrap


INPUT_WORD = re.compile(r'[+-]?[0-9]+')


@dataclass(frozen=True)
class Value:
    literal: int
    depth: int = 0  # Dereference hops

    def resolve(self, memory: MemoryPool) -> int:
        if self.depth > MAX_REFERENCE_DEPTH:
            raise ReferenceOverflow(f'References overflow: depth {self.depth}')

        result = self.literal

        for _ in range(self.depth):
            result = memory.get(result)

        return result

    def __str__(self) -> str:
        return '*' * self.depth + str(self.literal)


@dataclass(frozen=True)
class Instruction:
    kind: Kind
    args: tuple[Value, ...] = ()

    def __str__(self) -> str:
        mnemonic = 'NOP' if self.kind == Kind.NOP_MARK else self.kind.name
        return ' '.join([mnemonic] + [str(a) for a in self.args])


class State(Enum):
    RUNNING = 'running'
    HALTED = 'halted'
    FAULTED = 'faulted'


def c_div(a: int, b: int) -> int:
    if b == 0:
        raise RuntimeFault('Division by zero')

    if a == -SIGN_BIT and b == -1:
        raise RuntimeFault('Division overflow')

    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def c_mod(a: int, b: int) -> int:
    return a - b * c_div(a, b)


def shift_count(count: int) -> int:
    if not 0 <= count < WORD_BITS:
        raise RuntimeFault(f'Invalid shift: {count}')

    return count


def rotl(value: int, count: int) -> int:
    bits = value & WORD_MASK

    for _ in range(count % WORD_BITS):
        bits = ((bits << 1) | (bits >> (WORD_BITS - 1))) & WORD_MASK

    return wrap(bits)


def rotr(value: int, count: int) -> int:
    bits = value & WORD_MASK

    for _ in range(count % WORD_BITS):
        bits = (bits >> 1) | ((bits & 1) << (WORD_BITS - 1))

    return wrap(bits)


class Program:
    settings: Settings
    memory: MemoryPool
    instructions: list[Instruction]
    counter: int    # Next instruction
    current: int    # Instruction being executed
    elapsed: int    # Accumulated cost
    state: State

    def __init__(
        self,
        settings: Settings | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None
    ):
        self.settings = settings if settings is not None else Settings()

        fill = FillPolicy.ZERO if self.settings.friendly else FillPolicy.RANDOM
        self.memory = MemoryPool(fill, seed=self.settings.seed)

        self.instructions = []
        self.counter = 0
        self.current = 0
        self.elapsed = 0
        self.state = State.RUNNING
        self.started = False

        # None means the process streams at the time of use
        self.stdin = stdin
        self.stdout = stdout
        self.pending: deque[str] = deque()

    # - Helpers - #

    def debug_dump(self):
        lg.debug(
            f'PC:{self.counter} CUR:{self.current} T:{self.elapsed} '
            f'MEM:{len(self.memory)} {self.state.value}'
        )

    def exited(self) -> bool:
        return self.state != State.RUNNING

    def append(self, instruction: Instruction):
        if self.started:
            raise UserWarning('Cannot append to a started program')

        self.instructions.append(instruction)

    def read(self, value: Value) -> int:
        return value.resolve(self.memory)

    def write(self, index: Value, result: int):
        self.memory.set(self.read(index), result)

    def read_input(self) -> int:
        stream = self.stdin if self.stdin is not None else sys.stdin

        while not self.pending:
            line = stream.readline()

            if not line:
                raise RuntimeFault('Invalid input: end of stream')

            self.pending.extend(line.split())

        word = self.pending.popleft()

        if not INPUT_WORD.fullmatch(word):
            raise RuntimeFault(f'Invalid input: {word!r}')

        return int(word)

    def unary(self, args: tuple[Value, ...], op: Callable[[int], int]) -> int:
        (v, idx) = args
        self.write(idx, op(self.read(v)))
        return 0

    def binary(self, args: tuple[Value, ...], op: Callable[[int, int], int]) -> int:
        (v1, v2, idx) = args
        a = self.read(v1)
        b = self.read(v2)
        self.write(idx, op(a, b))
        return 0

    # - Operations - #

    def nop(self, args):
        return 0

    def nop_mark(self, args):
        (idx,) = args
        self.write(idx, self.current)
        return 0

    def mem(self, args):
        (v,) = args
        self.memory.resize(self.read(v))
        return 0

    def inp(self, args):
        (idx,) = args
        self.write(idx, self.read_input())
        return 0

    def out(self, args):
        (v,) = args
        print(self.read(v), file=self.stdout)
        return 1

    def set(self, args):
        return self.unary(args, lambda a: a)

    # - Arithmetic - #

    def add(self, args):
        return self.binary(args, lambda a, b: a + b)

    def sub(self, args):
        return self.binary(args, lambda a, b: a - b)

    def mul(self, args):
        return self.binary(args, lambda a, b: a * b)

    def div(self, args):
        return self.binary(args, c_div)

    def mod(self, args):
        return self.binary(args, c_mod)

    def inc(self, args):
        return self.unary(args, lambda a: a + 1)

    def dec(self, args):
        return self.unary(args, lambda a: a - 1)

    def nec(self, args):
        return self.unary(args, lambda a: -a)

    # - Bitwise - #

    def band(self, args):
        return self.binary(args, lambda a, b: a & b)

    def bor(self, args):
        return self.binary(args, lambda a, b: a | b)

    def xor(self, args):
        return self.binary(args, lambda a, b: a ^ b)

    def flip(self, args):
        return self.unary(args, lambda a: ~a)

    def lnot(self, args):
        return self.unary(args, lambda a: int(a == 0))

    def shl(self, args):
        return self.binary(args, lambda a, b: a << shift_count(b))

    def shr(self, args):
        return self.binary(args, lambda a, b: a >> shift_count(b))

    def rol(self, args):
        return self.binary(args, rotl)

    def ror(self, args):
        return self.binary(args, rotr)

    # - Comparison - #

    def equ(self, args):
        return self.binary(args, lambda a, b: int(a == b))

    def gter(self, args):
        return self.binary(args, lambda a, b: int(a > b))

    def less(self, args):
        return self.binary(args, lambda a, b: int(a < b))

    def geq(self, args):
        return self.binary(args, lambda a, b: int(a >= b))

    def leq(self, args):
        return self.binary(args, lambda a, b: int(a <= b))

    # - Flow - #

    def jmp(self, args):
        (v,) = args
        self.counter = self.read(v)
        return 0

    def jmov(self, args):
        (v,) = args
        self.counter += self.read(v)
        return 0

    def jif(self, args):
        (cond, addr) = args

        if self.read(cond) != 0:
            self.counter = self.read(addr)

        return 0

    def jifm(self, args):
        (cond, offset) = args

        if self.read(cond) != 0:
            self.counter += self.read(offset)

        return 0

    HANDLERS = {
        Kind.NOP: nop,
        Kind.NOP_MARK: nop_mark,
        Kind.MEM: mem,
        Kind.IN: inp,
        Kind.OUT: out,
        Kind.PRINT: out,
        Kind.SET: set,

        Kind.ADD: add,
        Kind.SUB: sub,
        Kind.MUL: mul,
        Kind.DIV: div,
        Kind.MOD: mod,
        Kind.INC: inc,
        Kind.DEC: dec,
        Kind.NEC: nec,

        Kind.AND: band,
        Kind.OR: bor,
        Kind.XOR: xor,
        Kind.FLIP: flip,
        Kind.NOT: lnot,
        Kind.SHL: shl,
        Kind.SHR: shr,
        Kind.ROL: rol,
        Kind.ROR: ror,

        Kind.EQU: equ,
        Kind.GTER: gter,
        Kind.LESS: less,
        Kind.GEQ: geq,
        Kind.LEQ: leq,

        Kind.JMP: jmp,
        Kind.JMOV: jmov,
        Kind.JIF: jif,
        Kind.JIFM: jifm
    }

    # -- Implementation -- #

    def step(self) -> bool:
        if self.exited():
            return False

        self.started = True

        if self.counter == len(self.instructions):
            lg.debug(f'Halted at {self.counter} after {self.elapsed}')
            self.state = State.HALTED
            return False

        try:
            if not 0 <= self.counter < len(self.instructions):
                raise RuntimeFault(f'Invalid position: {self.counter}')

            instruction = self.instructions[self.counter]
            self.current = self.counter
            self.counter += 1

            handler = self.HANDLERS[instruction.kind]
            self.elapsed += handler(self, instruction.args)

            if self.elapsed > self.settings.time_limit:
                raise TimeLimitExceeded(f'Time limit exceeded: {self.elapsed}')

        except RuntimeFault:
            self.state = State.FAULTED
            raise

        return True

    def run(self) -> int:
        while self.step():
            pass

        return self.elapsed

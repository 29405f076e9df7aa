from enum import Enum, auto


class Shape(Enum):
    NONE = ()
    INDEX = ('index',)
    VALUE = ('value',)
    VALUE_INDEX = ('value', 'index')
    VALUES = ('value', 'value')
    VALUES_INDEX = ('value', 'value', 'index')

    def arity(self) -> int:
        return len(self.value)


class Kind(Enum):
    # Basic
    NOP = auto()       # no effect
    NOP_MARK = auto()  # own counter -> M[I1]
    MEM = auto()       # resize memory to V1
    IN = auto()        # stdin -> M[I1]
    OUT = auto()       # V1 -> stdout
    PRINT = auto()     # V1 -> stdout
    SET = auto()       # V1 -> M[I2]

    # Arithmetic
    ADD = auto()  # V1 +  V2 -> M[I3]
    SUB = auto()  # V1 -  V2 -> M[I3]
    MUL = auto()  # V1 *  V2 -> M[I3]
    DIV = auto()  # V1 /  V2 -> M[I3], truncated
    MOD = auto()  # V1 %  V2 -> M[I3], sign of V1
    INC = auto()  # V1 + 1 -> M[I2]
    DEC = auto()  # V1 - 1 -> M[I2]
    NEC = auto()  # -V1 -> M[I2]

    # Bitwise
    AND = auto()   # V1 & V2 -> M[I3]
    OR = auto()    # V1 | V2 -> M[I3]
    XOR = auto()   # V1 ^ V2 -> M[I3]
    FLIP = auto()  # ~V1 -> M[I2]
    NOT = auto()   # !V1 -> M[I2]
    SHL = auto()   # V1 << V2 -> M[I3]
    SHR = auto()   # V1 >> V2 -> M[I3]
    ROL = auto()   # V1 rotl V2 -> M[I3]
    ROR = auto()   # V1 rotr V2 -> M[I3]

    # Comparison
    EQU = auto()   # V1 == V2 -> M[I3]
    GTER = auto()  # V1 >  V2 -> M[I3]
    LESS = auto()  # V1 <  V2 -> M[I3]
    GEQ = auto()   # V1 >= V2 -> M[I3]
    LEQ = auto()   # V1 <= V2 -> M[I3]

    # Flow
    JMP = auto()   # goto V1
    JMOV = auto()  # goto counter + V1
    JIF = auto()   # if V1 .ne 0 goto V2
    JIFM = auto()  # if V1 .ne 0 goto counter + V2


# Mnemonic -> (kind, operand shape). NOP is resolved by the parser
MNEMONICS: dict[str, tuple[Kind, Shape]] = {
    'NOP': (Kind.NOP, Shape.NONE),
    'MEM': (Kind.MEM, Shape.VALUE),
    'IN': (Kind.IN, Shape.INDEX),
    'OUT': (Kind.OUT, Shape.VALUE),
    'PRINT': (Kind.PRINT, Shape.VALUE),
    'SET': (Kind.SET, Shape.VALUE_INDEX),

    'ADD': (Kind.ADD, Shape.VALUES_INDEX),
    'SUB': (Kind.SUB, Shape.VALUES_INDEX),
    'MUL': (Kind.MUL, Shape.VALUES_INDEX),
    'DIV': (Kind.DIV, Shape.VALUES_INDEX),
    'MOD': (Kind.MOD, Shape.VALUES_INDEX),
    'INC': (Kind.INC, Shape.VALUE_INDEX),
    'DEC': (Kind.DEC, Shape.VALUE_INDEX),
    'NEC': (Kind.NEC, Shape.VALUE_INDEX),

    'AND': (Kind.AND, Shape.VALUES_INDEX),
    'OR': (Kind.OR, Shape.VALUES_INDEX),
    'XOR': (Kind.XOR, Shape.VALUES_INDEX),
    'FLIP': (Kind.FLIP, Shape.VALUE_INDEX),
    'NOT': (Kind.NOT, Shape.VALUE_INDEX),
    'SHL': (Kind.SHL, Shape.VALUES_INDEX),
    'SHR': (Kind.SHR, Shape.VALUES_INDEX),
    'ROL': (Kind.ROL, Shape.VALUES_INDEX),
    'ROR': (Kind.ROR, Shape.VALUES_INDEX),

    'EQU': (Kind.EQU, Shape.VALUES_INDEX),
    'GTER': (Kind.GTER, Shape.VALUES_INDEX),
    'LESS': (Kind.LESS, Shape.VALUES_INDEX),
    'GEQ': (Kind.GEQ, Shape.VALUES_INDEX),
    'LEQ': (Kind.LEQ, Shape.VALUES_INDEX),

    'JMP': (Kind.JMP, Shape.VALUE),
    'JMOV': (Kind.JMOV, Shape.VALUE),
    'JIF': (Kind.JIF, Shape.VALUES),
    'JIFM': (Kind.JIFM, Shape.VALUES),
}

# Documented in older material but never given semantics
RESERVED = frozenset(['CPY', 'EXIT', 'REQ'])

class MiniAsmError(Exception):
    pass


class ParseError(MiniAsmError):
    line: int | None

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def at_line(self, line: int):
        self.line = line
        return self

    def __str__(self) -> str:
        if self.line is None:
            return self.message

        return f'Line {self.line}: {self.message}'


class RuntimeFault(MiniAsmError):
    pass


class MemoryIndexError(RuntimeFault):
    pass


class MemoryLimitError(RuntimeFault):
    pass


class ReferenceOverflow(RuntimeFault):
    pass


class TimeLimitExceeded(RuntimeFault):
    pass

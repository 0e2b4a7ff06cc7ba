import os
from enum import Enum, auto
from typing import Optional

# Estado de salida reservado con el que un hijo de la shell pide terminar la sesión.
# Solo lo usan procesos hijos que ejecutan código de la shell, nunca un programa externo.
TERMINATE_STATUS = 254


class ControlOperator(Enum):
    """
    Clase que representa los operadores de control y su lexema.
    """

    NONE = ""
    SEQUENCE = ";"
    INPUT_REDIRECT = "<"
    OUTPUT_REDIRECT = ">"
    PIPE = "|"

    @classmethod
    def from_token(cls, token: str) -> "ControlOperator":
        for op in cls:
            if op is not cls.NONE and op.value == token:
                return op
        return cls.NONE

    @property
    def literal(self) -> str:
        return self.value


class ExecutionOutcome(Enum):
    CONTINUE = auto()
    TERMINATE = auto()

    @classmethod
    def from_status(cls, status: int) -> "ExecutionOutcome":
        if os.WIFEXITED(status) and os.WEXITSTATUS(status) == TERMINATE_STATUS:
            return cls.TERMINATE
        return cls.CONTINUE

    def to_status(self) -> int:
        return TERMINATE_STATUS if self is ExecutionOutcome.TERMINATE else 0


class PreviousCommand:
    """
    Clase que representa el último comando ejecutado (historial de profundidad 1).
    """

    def __init__(self, line: Optional[str] = None) -> None:
        self.line = line or ""

    def record(self, line: str) -> None:
        self.line = line

    def is_empty(self) -> bool:
        return not self.line

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __repr__(self) -> str:
        return f"PreviousCommand({self.line!r})"

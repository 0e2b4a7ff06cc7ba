"""
Jerarquía de errores de la shell.

    ShellError
    ├── TokenizeError
    │   └── UnterminatedQuote
    ├── DispatchError
    │   ├── UsageError
    │   └── OperatorSyntaxError
    └── ExecError
        ├── ProgramNotFound
        └── FileOpenFailure

Todos se reportan donde se detectan; ninguno termina la sesión.
"""

from typing import Optional


class ShellError(Exception):
    """
    Clase base de los errores de la shell.

    Atributos:
        message: descripción legible del error
        exit_status: código con el que sale un proceso hijo que lo reporta
    """

    exit_status = 1

    def __init__(self, message: str, exit_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if exit_status is not None:
            self.exit_status = exit_status


class TokenizeError(ShellError):
    pass


class UnterminatedQuote(TokenizeError):
    def __init__(self) -> None:
        super().__init__("syntax error: unterminated quote")


class DispatchError(ShellError):
    pass


class UsageError(DispatchError):
    """
    Cantidad incorrecta de argumentos para un comando interno.
    """

    def __init__(self, builtin: str, message: str, usage: str) -> None:
        super().__init__(f"{builtin}: {message}")
        self.builtin = builtin
        self.usage = usage


class OperatorSyntaxError(DispatchError):
    """
    Operador de control sin comando a uno de sus lados.
    """

    def __init__(self, operator: str) -> None:
        super().__init__(f"syntax error near unexpected token '{operator}'")
        self.operator = operator


class ExecError(ShellError):
    pass


class ProgramNotFound(ExecError):
    exit_status = 127

    def __init__(self, program: str) -> None:
        super().__init__(f"{program}: command not found")
        self.program = program


class FileOpenFailure(ExecError):
    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason

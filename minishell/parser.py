from typing import List, Tuple

from minishell.errors import OperatorSyntaxError
from minishell.model import ControlOperator

CONTROL_TOKENS = tuple(op.literal for op in ControlOperator if op is not ControlOperator.NONE)
COMMAND_SEPARATORS = (ControlOperator.SEQUENCE.literal, ControlOperator.PIPE.literal)


def is_control_token(token: str) -> bool:
    return token in CONTROL_TOKENS


def find_operator(tokens: List[str]) -> ControlOperator:
    """
    Devuelve el primer operador de control de izquierda a derecha.

    No hay precedencia entre operadores: decide solo la posición.
    """
    for token in tokens:
        if is_control_token(token):
            return ControlOperator.from_token(token)
    return ControlOperator.NONE


def split(op_literal: str, tokens: List[str]) -> Tuple[List[str], List[str]]:
    """
    Parte los tokens alrededor de la primera aparición de ``op_literal``.

    El operador no queda en ninguno de los dos lados.
    """
    assert op_literal in tokens, f"'{op_literal}' not in {tokens}"
    index = tokens.index(op_literal)
    return tokens[:index], tokens[index + 1 :]


def command_end(tokens: List[str]) -> int:
    """
    Índice del primer ``;`` o ``|``, donde termina el comando actual.

    Los argumentos y redirecciones antes de ese punto pertenecen al mismo
    comando. Si no hay ninguno devuelve ``len(tokens)``.
    """
    for i, token in enumerate(tokens):
        if token in COMMAND_SEPARATORS:
            return i
    return len(tokens)


def validate(tokens: List[str]) -> None:
    """
    Verifica que cada operador de control tenga un comando a cada lado.
    """
    for i, token in enumerate(tokens):
        if not is_control_token(token):
            continue
        if i == 0 or i == len(tokens) - 1:
            raise OperatorSyntaxError(token)
        if is_control_token(tokens[i + 1]):
            raise OperatorSyntaxError(tokens[i + 1])


class ShellParser:
    """
    Clase que representa el parser de la shell.

    Resuelve un paso a la vez: encuentra el operador activo y parte los
    tokens a su alrededor. Cada lado se vuelve a resolver por separado.
    """

    def __init__(self, tokens: List[str]) -> None:
        self.tokens = list(tokens)
        if self.tokens:
            validate(self.tokens)

    def operator(self) -> ControlOperator:
        return find_operator(self.tokens)

    def parse(self) -> Tuple[ControlOperator, List[str], List[str]]:
        op = self.operator()
        if op is ControlOperator.NONE:
            return op, self.tokens, []
        left, right = split(op.literal, self.tokens)
        return op, left, right

"""
Shell mínima: tokeniza una línea, resuelve los operadores ``;``, ``<``,
``>`` y ``|`` de izquierda a derecha y ejecuta cada parte en su propio
proceso hijo.
"""

from minishell.lexer import ShellLexer, tokenize
from minishell.model import ControlOperator, ExecutionOutcome, PreviousCommand
from minishell.parser import find_operator, split

__version__ = "1.0.0"

__all__ = [
    "ShellLexer",
    "tokenize",
    "ControlOperator",
    "ExecutionOutcome",
    "PreviousCommand",
    "find_operator",
    "split",
]

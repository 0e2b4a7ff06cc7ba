import os
import sys
from typing import Mapping, Optional

MAX_CHAR = 256
PROMPT = "shell $ "
WELCOME = "Welcome to mini-shell."
FAREWELL = "Bye bye."

COLORS = {
    "RESET": "\033[0m",
    "RED": "\033[91m",
    "GREEN": "\033[92m",
    "YELLOW": "\033[93m",
    "BLUE": "\033[94m",
    "MAGENTA": "\033[95m",
    "CYAN": "\033[96m",
}


class ShellConfig:
    """
    Clase que representa la configuración de la shell.

    Los valores por defecto pueden sobreescribirse con variables de entorno:
    NO_COLOR desactiva los colores, MINISHELL_PROMPT cambia el prompt y
    MINISHELL_MAX_LINE cambia la longitud máxima de línea.
    """

    def __init__(
        self,
        use_colors: bool = True,
        max_line_length: int = MAX_CHAR,
        prompt: str = PROMPT,
    ) -> None:
        self.use_colors = use_colors
        self.max_line_length = max_line_length
        self.prompt = prompt

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ShellConfig":
        if environ is None:
            environ = os.environ

        max_line_length = MAX_CHAR
        raw = environ.get("MINISHELL_MAX_LINE")
        if raw and raw.isdigit() and int(raw) > 0:
            max_line_length = int(raw)

        return cls(
            use_colors="NO_COLOR" not in environ,
            max_line_length=max_line_length,
            prompt=environ.get("MINISHELL_PROMPT", PROMPT),
        )

    def color(self, text: str, color_name: str) -> str:
        if not self.use_colors or not sys.stderr.isatty():
            return text
        return f"{COLORS.get(color_name, '')}{text}{COLORS['RESET']}"

    def truncate(self, line: str) -> str:
        return line[: self.max_line_length]

    def report(self, message: str) -> None:
        print(self.color(f"-shell: {message}", "RED"), file=sys.stderr, flush=True)

import sys
from typing import List

from minishell.config import ShellConfig
from minishell.errors import UnterminatedQuote

OPERATOR_CHARS = ("<", ">", ";", "(", ")", "|")
ESCAPED_TAB = "\\t"


class ShellLexer:
    """
    Clase que representa el lexer de la shell.

    Separa una línea en tokens. Los espacios y la secuencia literal ``\\t``
    separan tokens, las comillas dobles agrupan todo hasta la siguiente
    comilla, y cada carácter de operador es un token por sí solo.
    """

    def __init__(self) -> None:
        self.tokens: List[str] = []
        self.current_token = ""

    def tokenize(self, line: str) -> List[str]:
        self.tokens = []
        self.current_token = ""

        i = 0
        while i < len(line):
            char = line[i]

            if char == " ":
                self.add_token()
                i += 1
                continue

            if line.startswith(ESCAPED_TAB, i):
                self.add_token()
                i += len(ESCAPED_TAB)
                continue

            if char == '"':
                self.add_token()
                i = self.read_quoted(line, i + 1)
                continue

            if char in OPERATOR_CHARS:
                self.add_token()
                self.tokens.append(char)
                i += 1
                continue

            self.current_token += char
            i += 1

        self.add_token()
        return self.tokens

    def read_quoted(self, line: str, start: int) -> int:
        end = line.find('"', start)
        if end == -1:
            raise UnterminatedQuote()

        self.current_token = line[start:end]
        self.add_token()
        return end + 1

    def add_token(self) -> None:
        if self.current_token:
            self.tokens.append(self.current_token)
            self.current_token = ""


def tokenize(line: str) -> List[str]:
    return ShellLexer().tokenize(line)


def main() -> int:
    """
    Lee una línea de la entrada estándar e imprime un token por línea.
    """
    config = ShellConfig.from_environ()
    line = config.truncate(sys.stdin.readline().rstrip("\n"))

    try:
        tokens = tokenize(line)
    except UnterminatedQuote as e:
        config.report(e.message)
        return 1

    for token in tokens:
        print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())

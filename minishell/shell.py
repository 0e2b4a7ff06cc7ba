import sys
from typing import Optional

from minishell.config import FAREWELL, WELCOME, ShellConfig
from minishell.dispatcher import BuiltinDispatcher
from minishell.errors import TokenizeError
from minishell.lexer import tokenize
from minishell.model import ExecutionOutcome, PreviousCommand


class Shell:
    """
    Clase que representa la sesión interactiva.

    Lee una línea por turno hasta ``exit`` o fin de entrada. El comando
    previo pertenece a la sesión y se le pasa al despachador en cada línea.
    """

    def __init__(self, config: Optional[ShellConfig] = None) -> None:
        self.config = config or ShellConfig.from_environ()
        self.dispatcher = BuiltinDispatcher(config=self.config)
        self.prev = PreviousCommand()

    def read_line(self) -> str:
        line = input(self.config.prompt)
        return self.config.truncate(line)

    def run_line(self, line: str) -> ExecutionOutcome:
        try:
            tokens = tokenize(line)
        except TokenizeError as e:
            self.config.report(e.message)
            return ExecutionOutcome.CONTINUE

        return self.dispatcher.dispatch(tokens, line, self.prev)

    def run(self) -> int:
        print(WELCOME, flush=True)
        while True:
            try:
                line = self.read_line()
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

            try:
                outcome = self.run_line(line)
            except KeyboardInterrupt:
                print()
                continue

            if outcome is ExecutionOutcome.TERMINATE:
                break

        print(FAREWELL, flush=True)
        return 0


def main() -> int:
    shell = Shell()
    return shell.run()


if __name__ == "__main__":
    sys.exit(main())

import os
from typing import Callable, Dict, List, Optional

from minishell.config import ShellConfig
from minishell.errors import DispatchError, FileOpenFailure, TokenizeError, UsageError
from minishell.executer import CommandExecutor
from minishell.lexer import tokenize
from minishell.model import ControlOperator, ExecutionOutcome, PreviousCommand
from minishell.parser import find_operator, validate

HELP_TEXT = """Minishell
Built-in commands
---

usage: cd [directory_name]
Change the current working directory of the shell. If no directory is provided, changes to the home directory.

usage: source [filename]
Takes a filename as an argument and processes each line of the file as a command, including built-ins. Each line is processed as if it was entered by the user at the prompt.

usage: prev
Prints the previous command and executes it again. If there is no previous command, nothing is executed or printed.

usage: help
Explains all built-in commands available in this minishell."""


class BuiltinDispatcher:
    """
    Clase que representa el despachador de comandos internos.

    Mira solo el primer token: ``exit``, ``cd``, ``source``, ``prev`` y
    ``help`` se resuelven en la propia shell; cualquier línea con un
    operador de control, o cualquier otro comando, va al ejecutor.
    Todo comando salvo ``prev`` queda guardado como comando previo.
    """

    def __init__(
        self,
        executor: Optional[CommandExecutor] = None,
        config: Optional[ShellConfig] = None,
    ) -> None:
        self.config = config or ShellConfig.from_environ()
        self.executor = executor or CommandExecutor(self.config)
        self.builtins: Dict[str, Callable[[List[str], PreviousCommand], ExecutionOutcome]] = {
            "cd": self._builtin_cd,
            "source": self._builtin_source,
            "help": self._builtin_help,
        }

    def dispatch(
        self, tokens: List[str], raw_line: str, prev_state: PreviousCommand
    ) -> ExecutionOutcome:
        if not tokens:
            return ExecutionOutcome.CONTINUE

        try:
            return self._dispatch(tokens, raw_line, prev_state)
        except DispatchError as e:
            self.report(e)
        except FileOpenFailure as e:
            self.config.report(f"{tokens[0]}: {e.message}")
        return ExecutionOutcome.CONTINUE

    def _dispatch(
        self, tokens: List[str], raw_line: str, prev_state: PreviousCommand
    ) -> ExecutionOutcome:
        command = tokens[0]

        if command == "exit":
            return ExecutionOutcome.TERMINATE

        if find_operator(tokens) is not ControlOperator.NONE:
            prev_state.record(raw_line)
            validate(tokens)
            return self.executor.execute_special(tokens)

        if command == "prev":
            return self._builtin_prev(tokens, prev_state)

        prev_state.record(raw_line)

        builtin = self.builtins.get(command)
        if builtin is not None:
            return builtin(tokens[1:], prev_state)

        return self.executor.execute_special(tokens)

    def report(self, error: DispatchError) -> None:
        self.config.report(error.message)
        if isinstance(error, UsageError):
            self.config.report(f"{error.builtin}: usage: {error.usage}")

    def _builtin_cd(self, args: List[str], prev_state: PreviousCommand) -> ExecutionOutcome:
        if len(args) > 1:
            raise UsageError("cd", "too many arguments", "cd [directory_name]")

        if args:
            new_dir = args[0]
        else:
            new_dir = os.environ.get("HOME") or os.path.expanduser("~")

        try:
            os.chdir(new_dir)
        except OSError:
            self.config.report(f"cd: {new_dir}: given directory does not exist")
        return ExecutionOutcome.CONTINUE

    def _builtin_source(self, args: List[str], prev_state: PreviousCommand) -> ExecutionOutcome:
        if len(args) != 1:
            raise UsageError("source", "filename argument required", "source filename")

        filename = args[0]
        try:
            f = open(filename, "r", encoding="utf-8", errors="replace")
        except OSError as e:
            raise FileOpenFailure(filename, e.strerror or "cannot open file")

        # Las líneas del archivo tienen su propio comando previo
        source_prev = PreviousCommand()
        with f:
            for raw in f:
                line = self.config.truncate(raw.rstrip("\n"))
                try:
                    tokens = tokenize(line)
                except TokenizeError as e:
                    self.config.report(f"source: {e.message}")
                    continue

                if not tokens:
                    continue
                if tokens[0] == "exit":
                    break

                if self.dispatch(tokens, line, source_prev) is ExecutionOutcome.TERMINATE:
                    return ExecutionOutcome.TERMINATE
        return ExecutionOutcome.CONTINUE

    def _builtin_prev(self, tokens: List[str], prev_state: PreviousCommand) -> ExecutionOutcome:
        if len(tokens) != 1:
            raise UsageError("prev", "prev takes no arguments", "prev")

        if prev_state.is_empty():
            return ExecutionOutcome.CONTINUE

        line = prev_state.line
        print(line, flush=True)
        try:
            tokens = tokenize(line)
        except TokenizeError as e:
            self.config.report(e.message)
            return ExecutionOutcome.CONTINUE
        return self.dispatch(tokens, line, prev_state)

    def _builtin_help(self, args: List[str], prev_state: PreviousCommand) -> ExecutionOutcome:
        print(HELP_TEXT, flush=True)
        return ExecutionOutcome.CONTINUE

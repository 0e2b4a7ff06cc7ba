import os
import signal
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, List, NoReturn, Optional

from minishell.config import ShellConfig
from minishell.errors import ExecError, FileOpenFailure, ProgramNotFound, ShellError
from minishell.model import ControlOperator, ExecutionOutcome
from minishell.parser import ShellParser, command_end

OUTPUT_FILE_MODE = 0o644
INPUT_FLAGS = os.O_RDONLY
OUTPUT_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC


def flush_std_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass


def exit_code(status: int) -> int:
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return 128 + os.WTERMSIG(status)
    return 1


class CommandExecutor:
    """
    Clase que representa el ejecutor de comandos.

    Resuelve recursivamente el primer operador de control de la línea.
    Cada comando externo, cada lado de ``;``, cada redirección y cada
    etapa de un pipe corre en su propio proceso hijo; el proceso que lo
    crea siempre espera por él. Los descriptores estándar solo se tocan
    dentro de los hijos, nunca en la shell.

    Los hijos creados aquí ejecutan siempre código de la shell y terminan
    con ``os._exit``; los programas externos corren en un nieto. Así el
    estado de salida de un hijo indica solamente si se pidió ``exit``.
    """

    def __init__(self, config: Optional[ShellConfig] = None) -> None:
        self.config = config or ShellConfig.from_environ()
        self.last_return_code = 0

    def execute_special(self, tokens: List[str]) -> ExecutionOutcome:
        if not tokens:
            return ExecutionOutcome.CONTINUE

        op, left, right = ShellParser(tokens).parse()

        if op is ControlOperator.NONE:
            return self._execute_leaf(tokens)
        elif op is ControlOperator.SEQUENCE:
            return self._execute_sequence(left, right)
        elif op is ControlOperator.INPUT_REDIRECT:
            return self._execute_redirect(op, left, right, 0, INPUT_FLAGS)
        elif op is ControlOperator.OUTPUT_REDIRECT:
            return self._execute_redirect(op, left, right, 1, OUTPUT_FLAGS)
        return self._execute_pipe(left, right)

    def _execute_leaf(self, tokens: List[str]) -> ExecutionOutcome:
        if tokens[0] == "exit":
            return ExecutionOutcome.TERMINATE

        pid = self._fork()
        if pid == 0:
            self._exec_program(tokens)

        self.last_return_code = exit_code(self._wait(pid))
        return ExecutionOutcome.CONTINUE

    def _exec_program(self, tokens: List[str]) -> NoReturn:
        # Python ignora SIGPIPE y exec hereda las señales ignoradas
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
        try:
            os.execvp(tokens[0], tokens)
        except FileNotFoundError:
            error: ShellError = ProgramNotFound(tokens[0])
        except OSError as e:
            error = ExecError(f"{tokens[0]}: {e.strerror}", exit_status=126)
        except ValueError as e:
            error = ExecError(f"{tokens[0]}: {e}", exit_status=126)
        self.config.report(error.message)
        flush_std_streams()
        os._exit(error.exit_status)

    def _execute_sequence(self, left: List[str], right: List[str]) -> ExecutionOutcome:
        outcome = self._run_child(self.execute_special, left)
        if outcome is ExecutionOutcome.TERMINATE:
            return outcome
        return self._run_child(self.execute_special, right)

    def _execute_redirect(
        self, op: ControlOperator, left: List[str], right: List[str], target_fd: int, flags: int
    ) -> ExecutionOutcome:
        end = command_end(right)
        if end < len(right):
            # La redirección solo abarca su comando; lo que sigue al ``;`` o ``|`` va afuera
            command = left + [op.literal] + right[:end]
            rest = right[end + 1 :]
            if right[end] == ControlOperator.SEQUENCE.literal:
                return self._execute_sequence(command, rest)
            return self._execute_pipe(command, rest)

        return self._run_child(self._redirected, left, right, target_fd, flags)

    def _redirected(
        self, left: List[str], right: List[str], target_fd: int, flags: int
    ) -> ExecutionOutcome:
        filename = right[0]
        with self._opened(filename, flags, target_fd) as fd:
            os.dup2(fd, target_fd)

        # Argumentos y otras redirecciones después del archivo
        return self.execute_special(left + right[1:])

    def _execute_pipe(self, left: List[str], right: List[str]) -> ExecutionOutcome:
        return self._run_child(self._pipeline, left, right)

    def _pipeline(self, left: List[str], right: List[str]) -> ExecutionOutcome:
        read_fd, write_fd = os.pipe()
        writer = self._spawn(self._pipe_writer, left, read_fd, write_fd)

        os.close(write_fd)
        os.dup2(read_fd, 0)
        os.close(read_fd)

        outcome = self.execute_special(right)
        writer_outcome = ExecutionOutcome.from_status(self._wait(writer))

        if ExecutionOutcome.TERMINATE in (outcome, writer_outcome):
            return ExecutionOutcome.TERMINATE
        return ExecutionOutcome.CONTINUE

    def _pipe_writer(self, tokens: List[str], read_fd: int, write_fd: int) -> ExecutionOutcome:
        os.close(read_fd)
        os.dup2(write_fd, 1)
        os.close(write_fd)
        return self.execute_special(tokens)

    @contextmanager
    def _opened(self, filename: str, flags: int, target_fd: int) -> Iterator[int]:
        try:
            fd = os.open(filename, flags, OUTPUT_FILE_MODE)
        except OSError as e:
            raise FileOpenFailure(filename, e.strerror or str(e))
        try:
            yield fd
        finally:
            if fd != target_fd:
                os.close(fd)

    def _run_child(self, task: Callable[..., ExecutionOutcome], *args) -> ExecutionOutcome:
        return ExecutionOutcome.from_status(self._wait(self._spawn(task, *args)))

    def _spawn(self, task: Callable[..., ExecutionOutcome], *args) -> int:
        pid = self._fork()
        if pid != 0:
            return pid

        status = 1
        try:
            status = task(*args).to_status()
        except ShellError as e:
            self.config.report(e.message)
            status = e.exit_status
        except KeyboardInterrupt:
            status = 128 + signal.SIGINT
        except Exception as e:
            self.config.report(f"unexpected error: {e}")
        finally:
            flush_std_streams()
            os._exit(status)

    def _fork(self) -> int:
        flush_std_streams()
        return os.fork()

    def _wait(self, pid: int) -> int:
        while True:
            try:
                _, status = os.waitpid(pid, 0)
                return status
            except KeyboardInterrupt:
                # El hijo recibe el mismo SIGINT; hay que seguir esperando por él
                continue

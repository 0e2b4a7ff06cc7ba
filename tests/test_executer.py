import os
import stat
import tempfile
import unittest

from minishell.config import ShellConfig
from minishell.errors import OperatorSyntaxError
from minishell.executer import CommandExecutor
from minishell.model import ExecutionOutcome


class TestCommandExecutor(unittest.TestCase):
    """Estas pruebas crean procesos reales y verifican a través de archivos"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.executor = CommandExecutor(ShellConfig(use_colors=False))
        self.old_umask = os.umask(0o022)

    def tearDown(self):
        os.umask(self.old_umask)
        self.temp_dir.cleanup()

    def path(self, name):
        return os.path.join(self.temp_dir.name, name)

    def read(self, name):
        with open(self.path(name)) as f:
            return f.read()

    def write(self, name, content):
        with open(self.path(name), "w") as f:
            f.write(content)

    def run_tokens(self, tokens):
        return self.executor.execute_special(tokens)

    def test_01_leaf_runs_external_program(self):
        outcome = self.run_tokens(["sh", "-c", f"printf hi > {self.path('f')}"])
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)
        self.assertEqual(self.read("f"), "hi")
        self.assertEqual(self.executor.last_return_code, 0)

    def test_02_leaf_return_code_is_recorded(self):
        self.run_tokens(["sh", "-c", "exit 3"])
        self.assertEqual(self.executor.last_return_code, 3)

    def test_03_missing_program_only_fails_the_child(self):
        outcome = self.run_tokens(["definitely-not-a-real-program-xyz"])
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)
        self.assertEqual(self.executor.last_return_code, 127)

    def test_04_exit_leaf_terminates_without_a_process(self):
        self.assertIs(self.run_tokens(["exit"]), ExecutionOutcome.TERMINATE)

    def test_05_output_redirect_creates_and_truncates(self):
        self.write("out.txt", "old content that is longer")
        outcome = self.run_tokens(["printf", "x", ">", self.path("out.txt")])
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)
        self.assertEqual(self.read("out.txt"), "x")

    def test_06_output_redirect_file_mode(self):
        self.run_tokens(["printf", "x", ">", self.path("new.txt")])
        mode = stat.S_IMODE(os.stat(self.path("new.txt")).st_mode)
        self.assertEqual(mode, 0o644)

    def test_07_input_redirect(self):
        self.write("in.txt", "c\na\nb\n")
        self.run_tokens(["sort", "<", self.path("in.txt"), ">", self.path("out.txt")])
        self.assertEqual(self.read("out.txt"), "a\nb\nc\n")

    def test_08_missing_input_file_does_not_run_the_command(self):
        outcome = self.run_tokens(
            ["cat", "<", self.path("missing.txt"), ">", self.path("out.txt")]
        )
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)
        self.assertFalse(os.path.exists(self.path("out.txt")))

    def test_09_unwritable_output_target(self):
        outcome = self.run_tokens(["printf", "x", ">", self.path("no/such/dir/out.txt")])
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)

    def test_10_sequence_runs_left_then_right(self):
        log = self.path("log")
        outcome = self.run_tokens(
            ["sh", "-c", f"printf 1 >> {log}", ";", "sh", "-c", f"printf 2 >> {log}",
             ";", "sh", "-c", f"printf 3 >> {log}"]
        )
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)
        self.assertEqual(self.read("log"), "123")

    def test_11_sequence_is_not_gated_by_failure(self):
        self.run_tokens(
            ["definitely-not-a-real-program-xyz", ";", "printf", "ok", ">", self.path("f")]
        )
        self.assertEqual(self.read("f"), "ok")

    def test_12_exit_inside_sequence_terminates(self):
        self.assertIs(self.run_tokens(["true", ";", "exit"]), ExecutionOutcome.TERMINATE)

        outcome = self.run_tokens(["exit", ";", "printf", "x", ">", self.path("f")])
        self.assertIs(outcome, ExecutionOutcome.TERMINATE)
        self.assertFalse(os.path.exists(self.path("f")))

    def test_13_single_pipe(self):
        self.run_tokens(["printf", "a\nb\nc\n", "|", "wc", "-l", ">", self.path("out")])
        self.assertEqual(self.read("out").strip(), "3")

    def test_14_multi_stage_pipe(self):
        self.run_tokens(
            ["printf", "b\na\nb\n", "|", "sort", "|", "uniq", ">", self.path("out")]
        )
        self.assertEqual(self.read("out"), "a\nb\n")

    def test_15_pipe_stage_with_input_redirect(self):
        self.write("in.txt", "hello world\n")
        self.run_tokens(
            ["cat", "<", self.path("in.txt"), "|", "wc", "-w", ">", self.path("out")]
        )
        self.assertEqual(self.read("out").strip(), "2")

    def test_16_missing_program_in_pipe_does_not_hang(self):
        outcome = self.run_tokens(
            ["definitely-not-a-real-program-xyz", "|", "wc", "-c", ">", self.path("out")]
        )
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)
        self.assertEqual(self.read("out").strip(), "0")

    def test_17_exit_in_a_pipe_stage_terminates(self):
        self.assertIs(self.run_tokens(["exit", "|", "cat"]), ExecutionOutcome.TERMINATE)

    def test_18_shell_descriptors_are_never_altered(self):
        before = [os.fstat(fd).st_ino for fd in (0, 1, 2)]
        self.run_tokens(["printf", "x", "|", "cat", ">", self.path("out")])
        self.run_tokens(["cat", "<", self.path("out"), ">", self.path("copy")])
        after = [os.fstat(fd).st_ino for fd in (0, 1, 2)]
        self.assertEqual(before, after)
        self.assertEqual(self.read("copy"), "x")

    def test_19_malformed_operator_raises_before_forking(self):
        with self.assertRaises(OperatorSyntaxError):
            self.run_tokens(["|", "wc"])
        with self.assertRaises(OperatorSyntaxError):
            self.run_tokens(["ls", ";"])

    def test_20_empty_tokens(self):
        self.assertIs(self.run_tokens([]), ExecutionOutcome.CONTINUE)

    def test_21_redirect_ends_at_the_next_sequence(self):
        outcome = self.run_tokens(["printf", "a", ">", self.path("out"), ";", "printf", "b"])
        self.assertIs(outcome, ExecutionOutcome.CONTINUE)
        self.assertEqual(self.read("out"), "a")

    def test_22_redirect_ends_at_the_next_pipe(self):
        """La salida ya fue al archivo, el pipe no recibe nada"""
        self.run_tokens(
            ["printf", "abc", ">", self.path("out"), "|", "wc", "-c", ">", self.path("count")]
        )
        self.assertEqual(self.read("out"), "abc")
        self.assertEqual(self.read("count").strip(), "0")

    def test_23_arguments_after_the_target_stay_with_the_command(self):
        self.run_tokens(["printf", ">", self.path("out"), "%s-%s", "x", "y", ";", "true"])
        self.assertEqual(self.read("out"), "x-y")


if __name__ == "__main__":
    unittest.main()

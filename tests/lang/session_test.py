from contextlib import redirect_stdout
import io
import os
import tempfile
import unittest

from blocklang.lang import value
from blocklang.lang.error import ErrorHandler, GenericException, UndefinedBinding
from blocklang.lang.session import Session
from blocklang.lang.shell import Shell


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp_dir.cleanup()

    def write(self, source):
        path = os.path.join(self.tmp_dir.name, "prog.bl")
        with open(path, "w") as file:
            file.write(source)
        return path

    def test_file(self):
        cases = {
            "1+2\n": value.Number(3),
            "{\n  let a = 2\n  a * 3\n}\n": value.Number(6),
            "{\n  fn add x y => x + y\n  add 20 22\n}": value.Number(42),
        }
        for case, expected in cases.items():
            sess = Session(ErrorHandler(fatal=False), self.write(case), cmd_line=False)
            sess.add(sess.source)
            sess.run()
            self.assertEqual([expected], sess.results, case)

    def test_file_errors_propagate(self):
        sess = Session(ErrorHandler(fatal=False), self.write("{ nope }"), cmd_line=False)
        sess.add(sess.source)
        self.assertRaises(UndefinedBinding, sess.run)
        self.assertEqual({}, sess.to_exec)

    def test_missing_file(self):
        path = os.path.join(self.tmp_dir.name, "missing.bl")
        self.assertRaises(GenericException, Session, ErrorHandler(fatal=False), path, cmd_line=False)

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, ErrorHandler(fatal=False), Session.SH_FILE, cmd_line=False)

    def test_cmd_line(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)
        self.assertFalse(sess.error_handler.fatal)

        sess.add("let a = 4", 1)
        sess.run()
        sess.add("a + 1", 2)
        sess.run()
        self.assertEqual([value.UNIT, value.Number(5)], sess.results)
        self.assertEqual(value.Number(5), sess.pop())

    def test_max_depth(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, max_depth=3)
        self.assertEqual(3, sess.env.max_depth)

    def test_preprocess_line(self):
        cases = {
            "{ let a = 1  ": ("{ let a = 1", True),
            "{ 1 }\n": ("{ 1 }", False),
            "{{ 1 }": ("{{ 1 }", True),
            "1": ("1", False),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(case), case)

    def test_tree(self):
        expected = "\n".join([
            "Root@0..3",
            "  BinaryExpr@0..3",
            "    Number@0..1 \"1\"",
            "    Plus@1..2 \"+\"",
            "    Number@2..3 \"2\"",
        ])
        self.assertEqual(expected, Session.tree("1+2"))
        self.assertIn("error: expected ')'", Session.tree("(1"))


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True))

    def run_lines(self, *lines):
        output = io.StringIO()
        with redirect_stdout(output):
            for line in lines:
                self.shell.onecmd(line)
        return output.getvalue()

    def test_bindings_persist(self):
        self.assertEqual("10\n", self.run_lines("let a = 2", "a * 5"))

    def test_unit_is_not_printed(self):
        self.assertEqual("", self.run_lines("{}", "fn f => 1"))

    def test_line_continuation(self):
        self.assertEqual("", self.run_lines("{", "let b = 3"))
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.assertEqual("4\n", self.run_lines("b + 1 }"))
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

    def test_errors_do_not_exit(self):
        output = self.run_lines("nope", "1 + 1")
        self.assertIn("error: ", output)
        self.assertTrue(output.endswith("2\n"))

    def test_tree(self):
        self.assertIn("BinaryExpr@0..5", self.run_lines(":tree 1+2*3"))

    def test_command_names_are_free_identifiers(self):
        self.assertEqual("2\n", self.run_lines("fn tree x => x + 1", "tree 1"))
        self.assertIn("error: ", self.run_lines("exit"))
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

    def test_open_block_swallows_commands(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.assertFalse(self.shell.onecmd("{"))
            self.assertFalse(self.shell.onecmd("let exit = 3"))
            self.assertFalse(self.shell.onecmd("exit"))
        self.assertEqual("", output.getvalue())
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.assertEqual("3\n", self.run_lines("}"))
        self.assertEqual("10\n", self.run_lines("{", "fn tree x => x * 2", "", "tree 5 }"))

    def test_open_block_ignores_command_prefix(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.assertFalse(self.shell.onecmd("{"))
            self.assertFalse(self.shell.onecmd(":exit"))
            self.assertFalse(self.shell.onecmd("}"))
        self.assertIn("error: ", output.getvalue())
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

    def test_empty_line(self):
        self.assertEqual("", self.run_lines("", "  "))

    def test_exit(self):
        self.assertTrue(self.shell.onecmd(":exit"))
        output = io.StringIO()
        with redirect_stdout(output):
            self.assertFalse(self.shell.onecmd(":exit now"))
        self.assertIn("warning: ", output.getvalue())


if __name__ == '__main__':
    unittest.main()

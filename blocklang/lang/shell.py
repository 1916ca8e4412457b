"""Handles interactive/command-line mode for the blocklang interpreter. Uses cmd as backend."""

import cmd

from blocklang.lang.value import UNIT


class Shell(cmd.Cmd):
    """blocklang interpreter shell."""
    intro = "blocklang interpreter :: Python backend\nType ':help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def onecmd(self, line):
        """Only lines prefixed with ':' are shell commands, and never inside an open block. Everything else is
        blocklang source.
        """
        if line == "EOF":
            return self.do_EOF("")
        if not line.strip() and not self._tmp_line:
            return self.emptyline()
        if line.startswith(":") and not self._tmp_line:
            return super().onecmd(line[1:])
        return self.default(line)

    def default(self, line):
        """Evaluates arbitrary blocklang statement."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if self._tmp_line:
                line = self._tmp_line + "\n" + line
            line, add_to_prev = self.sess.preprocess_line(line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(line, self.line_num)
            self.sess.run()

            if self.sess.results:
                result = self.sess.pop()
                if result != UNIT:
                    print(result)

    def do_tree(self, arg):
        """Prints the concrete syntax tree of an expression: :tree 1+2*3"""
        with self.sess.error_handler:
            print(self.sess.tree(arg))

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the blocklang interpreter!\n\n"
              "blocklang has integers, the four arithmetic operators, let bindings, blocks\n"
              "and functions. A block opened with '{' continues over several lines.\n\n"
              "Try it out by typing 'fn add x y => x + y'. This will define a function\n"
              "'add'. Next, try typing 'add 1 2', giving '3' as the result. ':tree 1+2*3'\n"
              "shows how the precedence-climbing parser groups an expression.\n\n"
              "Shell commands start with ':' (':tree', ':help', ':exit'), so names such as\n"
              "'tree' or 'exit' are free for your own bindings and functions.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            self.sess.error_handler.warn("unrecognized token: '{}'", arg, diagnosis=False)
            return False
        return True

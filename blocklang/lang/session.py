"""Session control for blocklang. Runs parsed programs against one persistent Environment, either from a source file
or from command-line mode.
"""

from blocklang.lang.env import Environment
from blocklang.lang.error import GenericException
from blocklang.lang.lexical import parse
from blocklang.syntax.parser import Parser


class Session:
    """Governs a blocklang session: owns the top-level Environment that every statement is evaluated against."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, max_depth=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment(max_depth=max_depth)
        self.to_exec = {}  # dict of line num: (source, Parse) to evaluate
        self.results = []  # values of evaluated statements, oldest first
        self.source = ""

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    self.source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Removes trailing whitespace from line. Returns updated value of line and whether the line leaves a block
        open, in which case the next line should be appended to it.
        """
        line = line.rstrip()
        return line, line.count("{") > line.count("}")

    def add(self, source, line_num=1):
        """Parses source as one program. Evaluation is delayed until run is called."""
        source, __ = Session.preprocess_line(source)
        self.error_handler.register_line(self.path, source, line_num)  # in case error is raised

        self.to_exec[line_num] = (source, parse(source))

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates every added program, in order, against this session's Environment. Will raise any errors that are
        encountered.
        """
        for line_num, (source, program) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)

            try:
                self.results.append(program.eval(self.env))
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Returns and forgets the most recent result."""
        return self.results.pop()

    @staticmethod
    def tree(source):
        """Returns the concrete syntax tree of source, as built by the precedence-climbing parser."""
        syntax = Parser(source).parse()
        lines = [syntax.debug_tree()]
        lines += [f"error: {error}" for error in syntax.errors]
        return "\n".join(lines)

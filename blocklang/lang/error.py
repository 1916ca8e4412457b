"""Error handling for blocklang. Only GenericExceptions should be encountered during running: if another type of error
is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every parse/eval step either succeeds or raises; the first failure wins and nothing is accumulated.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a blocklang error/warning. The offending
    snippets in exprs fill the '{}' slots of msg.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.plain = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain)

    def __str__(self):
        return self.plain


class ParseError(GenericException):
    """Raised by any parser that cannot match the remaining input. rest is the input left at the point of failure."""

    def __init__(self, msg, exprs=None, rest=""):
        super().__init__(msg, exprs, diagnosis=False)
        self.rest = rest

    def locate(self, source):
        """Points the diagnosis at the failure position within source. Returns self."""
        self.expr = source
        self.start = max(len(source) - len(self.rest), 0)
        self.end = self.start + 1
        self.diagnosis = bool(source)
        return self


class LeftoverInput(ParseError):
    """A statement was parsed, but the parser stopped before the end of the source."""

    def __init__(self, rest):
        super().__init__("input was not consumed fully by parser.", rest=rest)


class EvalError(GenericException):
    """Superclass for every failure raised while evaluating a parsed tree."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class UndefinedBinding(EvalError):

    def __init__(self, name):
        super().__init__("binding with name '{}' does not exist", name)
        self.name = name


class UndefinedFunction(EvalError):

    def __init__(self, name):
        super().__init__("function with name '{}' does not exist.", name)
        self.name = name


class ArityMismatch(EvalError):

    def __init__(self, expected, actual):
        super().__init__("expected {} parameters, got {}", (expected, actual))
        self.expected = expected
        self.actual = actual


class NonNumericOperand(EvalError):

    def __init__(self):
        super().__init__("cannot evaluate operation whose operands are not numbers")


class DivisionByZero(EvalError):

    def __init__(self, expr):
        super().__init__("'{}' divides by zero", expr)


class IntegerOverflow(EvalError):
    """Numbers are signed 32-bit integers: a literal or result outside that range is an error, never wrapped."""

    def __init__(self, number):
        super().__init__("'{}' does not fit in a signed 32-bit integer", number)
        self.number = number


class RecursionDepthExceeded(EvalError):

    def __init__(self, max_depth):
        super().__init__("maximum scope depth of {} exceeded", max_depth)
        self.max_depth = max_depth


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom blocklang errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded. Only the line holding error.start is shown."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        line_start = error.expr.rfind("\n", 0, error.start) + 1
        line_end = error.expr.find("\n", error.start)
        if line_end == -1:
            line_end = len(error.expr)

        line = error.expr[line_start:line_end]
        start = error.start - line_start
        end = min(max(error.end - line_start, start + 1), len(line))

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * max(end - start - 1, 0), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        for file, (__, line_num) in self.traceback.items():
            if line_num is not None:
                error_msg = colored(f"{file}:{line_num}: ", attrs=["bold"]) + error_msg
                break

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line.splitlines()[0] if line.strip() else line}\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for file in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.traceback[file] = (None, None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded while parsing or evaluating"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit

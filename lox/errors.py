import sys

from lox.tokens import TokenType


class LoxRuntimeError(Exception):
    def __init__(self, token, message):
        super().__init__(message)
        self.token = token
        self.message = message


class ErrorReporter:
    """Collects diagnostics from every stage of the pipeline.

    The driver checks ``had_error`` after scanning, parsing and resolving,
    and ``had_runtime_error`` after interpreting.
    """

    def __init__(self, stream=None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line, message):
        self.report(line, "", message)

    def error_at(self, token, message):
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error):
        self.write(f"{error.message}\n[line {error.token.line}]")
        self.had_runtime_error = True

    def report(self, line, where, message):
        self.write(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def reset(self):
        self.had_error = False
        self.had_runtime_error = False

    def write(self, text):
        print(text, file=self.stream or sys.stderr)

import argparse
import sys

from lox.errors import ErrorReporter
from lox.interpreter import Interpreter
from lox.parser import Parser
from lox.printer import AstPrinter
from lox.resolver import Resolver, report_too_deep
from lox.scanner import Scanner

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

# Each Lox call costs about a dozen Python frames.
RECURSION_LIMIT = 10000


def read_source(path):
    # Decoded from bytes: a lone "\r" is whitespace, not a line break.
    with open(path, "rb") as file:
        return file.read().decode("utf-8")


class Lox:
    def __init__(self, out=None, err=None):
        self.out = out
        self.reporter = ErrorReporter(err)
        self.interpreter = Interpreter(self.reporter, out)

    def run(self, source):
        tokens = Scanner(source, self.reporter).scan_tokens()
        if self.reporter.had_error:
            return

        statements = Parser(tokens, self.reporter).parse()

        # Stop if there was a syntax error.
        if self.reporter.had_error:
            return

        Resolver(self.interpreter, self.reporter).resolve(statements)

        if self.reporter.had_error:
            return

        self.interpreter.interpret(statements)

    def run_file(self, path):
        self.run(read_source(path))
        return self.exit_code()

    def run_prompt(self):
        while True:
            try:
                line = input("> ")
            except EOFError:
                print(file=self.out or sys.stdout)
                break
            self.run(line)
            self.reporter.reset()
        return EX_OK

    def dump_tokens(self, source):
        for token in Scanner(source, self.reporter).scan_tokens():
            print(token, file=self.out or sys.stdout)
        return self.exit_code()

    def dump_ast(self, source):
        tokens = Scanner(source, self.reporter).scan_tokens()
        if self.reporter.had_error:
            return self.exit_code()

        statements = Parser(tokens, self.reporter).parse()
        if self.reporter.had_error:
            return self.exit_code()

        printer = AstPrinter()
        for statement in statements:
            try:
                text = printer.print(statement)
            except RecursionError:
                report_too_deep(self.reporter, statement)
                return self.exit_code()
            print(text, file=self.out or sys.stdout)
        return self.exit_code()

    def exit_code(self):
        if self.reporter.had_error:
            return EX_DATAERR
        if self.reporter.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="lox", description="Run Lox scripts")
    parser.add_argument("script", nargs="*")
    dump = parser.add_mutually_exclusive_group()
    dump.add_argument("--tokens", action="store_true",
                      help="print the scanned tokens instead of running")
    dump.add_argument("--ast", action="store_true",
                      help="print the parsed syntax tree instead of running")
    args = parser.parse_args(argv)
    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    if len(args.script) > 1:
        print(f"Usage: {parser.prog} [script]")
        return EX_USAGE

    lox = Lox()

    if not args.script:
        if args.tokens:
            return lox.dump_tokens(sys.stdin.read())
        if args.ast:
            return lox.dump_ast(sys.stdin.read())
        return lox.run_prompt()

    path = args.script[0]
    try:
        if args.tokens:
            return lox.dump_tokens(read_source(path))
        if args.ast:
            return lox.dump_ast(read_source(path))
        return lox.run_file(path)
    except OSError as error:
        print(f"Could not read '{path}': {error.strerror}", file=sys.stderr)
        return EX_NOINPUT
    except UnicodeDecodeError:
        print(f"Could not decode '{path}' as UTF-8.", file=sys.stderr)
        return EX_DATAERR


if __name__ == "__main__":
    sys.exit(main())

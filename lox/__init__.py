from lox.errors import ErrorReporter, LoxRuntimeError
from lox.interpreter import Interpreter
from lox.parser import Parser
from lox.resolver import Resolver
from lox.scanner import Scanner
from lox.tokens import Token, TokenType

__version__ = "1.0.0"

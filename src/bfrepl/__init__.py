from .api import RunOptions, Session, run_file, run_string
from .engine import EOFPolicy, TurnResult, execute
from .errors import BFError, BFIOError, UnbalancedBracketError
from .lexer import Program, preprocess
from .state import CellStore

__all__ = [
    'RunOptions',
    'Session',
    'run_string',
    'run_file',
    'EOFPolicy',
    'TurnResult',
    'execute',
    'BFError',
    'BFIOError',
    'UnbalancedBracketError',
    'Program',
    'preprocess',
    'CellStore',
]

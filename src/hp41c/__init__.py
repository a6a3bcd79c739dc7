'''
HP-41C keystroke emulator.

Keystrokes go in one at a time, the way they would on the calculator's
keyboard: digits build a number, letters build a command name, and a command
fires as soon as it is fully typed (SIN) or as soon as its argument is (FIX 4,
STO 05). Arithmetic is on the four register RPN stack with HP style lift and
drop. Programs are keyed in programming mode and run with XEQ, R/S or SST.
'''

# TODO: ALPHA register and the XEQ "alpha" global labels it names.
# TODO: Persist program memory and registers between sessions.

from .calculator import Calculator
from .cli import CLI
from .lexer import Lexer
from .observer import LoggingObserver, Observer
from .util import HP41CError, describe


__all__ = 'Calculator', 'Lexer', 'CLI', 'Observer', 'LoggingObserver', \
    'HP41CError', 'describe'

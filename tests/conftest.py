from pytest import Item, fixture

from hp41c.calculator import Calculator
from hp41c.lexer import Lexer
from hp41c.parser import CommandParser
from hp41c.programming import ProgrammingMode


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every passing assertion, for auditing keystroke scenarios.

    Use with pytest -rP and enable_assertion_pass_hook.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def calculator():
    return Calculator()


@fixture
def parser():
    return CommandParser()


@fixture
def programming():
    return ProgrammingMode()


@fixture
def press(calculator):
    '''
    Type a keystroke script into the calculator fixture; returns the last
    message.
    '''
    lexer = Lexer()

    def press(script):
        message = None
        for key in lexer.keystrokes(script):
            message = calculator.process_input(key)
        return message
    return press

'''
Logging observer tests
'''

import logging

from hp41c.calculator import Calculator
from hp41c.observer import LoggingObserver
from hp41c.util import DivisionByZero

from pytest import fixture, raises


@fixture
def observer():
    observer = LoggingObserver('hp41c_test')
    yield observer
    for logger in observer.loggers.values():
        logger.setLevel(logging.NOTSET)


def test_presets(observer):
    observer.configure('minimal')
    assert observer.config_string() == 'Logging: FLAGS|STACK'
    observer.configure('off')
    assert observer.config_string() == 'Logging: NONE'
    observer.configure('all')
    assert observer.config_string() == \
        'Logging: INPUT|FLAGS|STACK|COMMANDS|PROGRAMMING|STORAGE'
    with raises(ValueError):
        observer.configure('loud')


def test_stack_logged(observer, caplog):
    observer.configure('all')
    calculator = Calculator(observer=observer)
    with caplog.at_level(logging.DEBUG, logger='hp41c_test'):
        for key in ['5', 'enter', '3', '+']:
            calculator.process_input(key)
    stack = [r.getMessage() for r in caplog.records
             if r.name == 'hp41c_test.stack']
    assert 'Operation: +' in stack
    assert any('X:    8.0000' in message for message in stack)
    assert "Key: 'enter'" in [r.getMessage() for r in caplog.records]


def test_minimal_skips_commands(observer, caplog):
    observer.configure('minimal')
    calculator = Calculator(observer=observer)
    with caplog.at_level(logging.DEBUG):
        calculator.process_input('5')
        calculator.process_input('sin')
    names = {r.name for r in caplog.records}
    assert 'hp41c_test.commands' not in names
    assert 'hp41c_test.input' not in names
    assert 'hp41c_test.stack' in names


def test_errors_logged(observer, caplog):
    observer.configure('all')
    calculator = Calculator(observer=observer)
    with caplog.at_level(logging.DEBUG, logger='hp41c_test'):
        with raises(DivisionByZero):
            calculator.process_input('/')
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert [r.getMessage() for r in warnings] == ['Division by zero']


def test_storage_logged(observer, caplog):
    observer.configure('all')
    calculator = Calculator(observer=observer)
    with caplog.at_level(logging.DEBUG, logger='hp41c_test'):
        for key in '7sto12':
            calculator.process_input(key)
    assert 'STO register 12: 7.0' in [r.getMessage() for r in caplog.records]

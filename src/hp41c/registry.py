'''
Command registry: every keyboard command with the argument it takes and when
it fires.

The table is built once and never mutated. The parser consults it for every
keystroke; only the final execution step lives elsewhere.
'''

from collections import namedtuple
from enum import Enum
from types import MappingProxyType

import regex


class ArgumentPattern(Enum):
    NONE = 'none'
    # One digit 0-9: FIX 4
    SINGLE_DIGIT = 'single digit'
    # Two digits 00-99, typed one at a time: STO 15
    REGISTER = 'register'
    # One letter or digit: LBL A
    LABEL = 'label'
    # Program name: XEQ 'MYPROG'
    ALPHA = 'alpha'
    # Checked by a Validator. No built in command uses it; it is there for
    # registries built with extra commands
    CUSTOM = 'custom'


class AutoExecute(Enum):
    # As soon as the name is typed
    IMMEDIATE = 'immediate'
    # As soon as the arguments are typed
    ON_COMPLETE = 'on complete'
    # Only on space or ENTER
    MANUAL = 'manual'


class Validator(Enum):
    '''
    Closed set of argument checks for ArgumentPattern.CUSTOM.
    '''
    DIGIT = r'[0-9]'
    LETTER = r'[A-Za-z]'
    ALNUM = r'[A-Za-z0-9]'
    REGISTER = r'[0-9]{1,2}'

    def __call__(self, argument):
        return regex.fullmatch(self.value, argument) is not None


# One keystroke's worth of argument, per pattern. REGISTER is checked one
# digit at a time.
ARGUMENT_CLASSES = {
    ArgumentPattern.SINGLE_DIGIT: r'[0-9]',
    ArgumentPattern.REGISTER: r'[0-9]',
    ArgumentPattern.LABEL: r'[A-Za-z0-9]',
    ArgumentPattern.ALPHA: r'[A-Za-z0-9_]+',
}


class CommandSpec(namedtuple('CommandSpec', ['name',
                                             'pattern',
                                             'auto_execute',
                                             'description',
                                             'validator'])):
    __slots__ = ()

    def __new__(cls, name, pattern=ArgumentPattern.NONE,
                auto_execute=AutoExecute.IMMEDIATE, description=None,
                validator=None):
        if (pattern is ArgumentPattern.CUSTOM) != (validator is not None):
            raise ValueError('Custom pattern needs exactly a validator: {}'
                             .format(name))
        return super().__new__(cls, name.lower(), pattern, auto_execute,
                               description, validator)

    def takes_arguments(self):
        return self.pattern is not ArgumentPattern.NONE

    def accepts(self, argument):
        '''
        Return True if argument belongs to this command's argument class.
        '''
        if self.pattern is ArgumentPattern.NONE:
            return False
        if self.pattern is ArgumentPattern.CUSTOM:
            return self.validator(argument)
        return regex.fullmatch(ARGUMENT_CLASSES[self.pattern],
                               argument) is not None


def _group(names, pattern, auto_execute, describe):
    return [CommandSpec(name, pattern, auto_execute, describe(name))
            for name in names]


DEFAULT_SPECS = (
    # Math functions
    _group(['sin', 'cos', 'tan', 'asin', 'acos', 'atan',
            'log', 'ln', 'exp', 'sqrt', 'inv', 'chs'],
           ArgumentPattern.NONE, AutoExecute.IMMEDIATE,
           lambda name: '{} function'.format(name.upper())) +
    # Stack operations
    _group(['enter', 'swap', 'clx', 'clr'],
           ArgumentPattern.NONE, AutoExecute.IMMEDIATE,
           lambda name: '{} operation'.format(name.upper())) +
    # Arithmetic
    _group(['+', '-', '*', '/', '^', '!'],
           ArgumentPattern.NONE, AutoExecute.IMMEDIATE,
           lambda name: 'Arithmetic operation') +
    # Display modes
    _group(['fix', 'sci', 'eng'],
           ArgumentPattern.SINGLE_DIGIT, AutoExecute.ON_COMPLETE,
           lambda name: '{} display mode'.format(name.upper())) +
    # Storage and register arithmetic
    _group(['sto', 'rcl', 'st+', 'st-', 'st*', 'st/'],
           ArgumentPattern.REGISTER, AutoExecute.ON_COMPLETE,
           lambda name: '{} operation'.format(name.upper())) +
    # Labels
    _group(['lbl', 'gto'],
           ArgumentPattern.LABEL, AutoExecute.ON_COMPLETE,
           lambda name: '{} programming command'.format(name.upper())) +
    [CommandSpec('xeq', ArgumentPattern.ALPHA, AutoExecute.ON_COMPLETE,
                 'Execute program')] +
    # Programming control
    _group(['rtn', 'sst', 'bst', 'prgm', 'del', 'rs'],
           ArgumentPattern.NONE, AutoExecute.IMMEDIATE,
           lambda name: '{} programming command'.format(name.upper())) +
    [
        CommandSpec('pi', description='Mathematical constant'),
        CommandSpec('eex', description='Enter exponent'),
        CommandSpec('arc', description='Arc prefix for SIN, COS, TAN'),
    ]
)


class CommandRegistry:
    '''
    Immutable name -> CommandSpec table. Names are lowercase.
    '''

    def __init__(self, specs=DEFAULT_SPECS):
        self._specs = MappingProxyType({spec.name: spec for spec in specs})

    def get(self, name):
        '''
        Return the spec for name, or None.
        '''
        return self._specs.get(name.lower())

    def __contains__(self, name):
        return name.lower() in self._specs

    def __iter__(self):
        return iter(self._specs.values())

    def __len__(self):
        return len(self._specs)

    def names(self):
        return sorted(self._specs)

    def is_prefix(self, prefix):
        '''
        Return True if prefix strictly begins some command name.
        '''
        prefix = prefix.lower()
        return any(name != prefix and name.startswith(prefix)
                   for name in self._specs)

    def specs_by_pattern(self, pattern):
        return [spec for spec in self._specs.values()
                if spec.pattern is pattern]


# Shared by every parser
REGISTRY = CommandRegistry()


def is_valid_command(name):
    return name in REGISTRY

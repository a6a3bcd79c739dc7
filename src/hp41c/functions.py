'''
Scientific functions of X.

Every function checks its domain before computing and its result after, so a
failure never reaches the stack.
'''

import math

from .util import DivisionByZero, MathError, wrap_user_errors


FACTORIAL_MAX = 170


def _in_unit_interval(x, name):
    if not -1.0 <= x <= 1.0:
        raise MathError('{}: input must be in range [-1, 1]'.format(name))
    return x


def _positive(x, name):
    if x <= 0.0:
        raise MathError('{} requires positive input'.format(name))
    return x


def _non_negative(x, name):
    if x < 0.0:
        raise MathError('{} requires non-negative input'.format(name))
    return x


def _checked(name):
    '''
    Validate the result of a function: NaN and infinity are errors.
    '''
    def decorator(f):
        @wrap_user_errors(MathError, name + ': cannot evaluate at {}')
        def wrapper(x):
            result = f(x)
            if math.isnan(result):
                raise MathError('{}: Invalid result'.format(name))
            if math.isinf(result):
                raise MathError('{}: Overflow'.format(name))
            return result
        wrapper.__name__ = name
        wrapper.__doc__ = f.__doc__
        return wrapper
    return decorator


@_checked('sin')
def sin(x):
    return math.sin(x)


@_checked('cos')
def cos(x):
    return math.cos(x)


@_checked('tan')
def tan(x):
    return math.tan(x)


@_checked('asin')
def asin(x):
    return math.asin(_in_unit_interval(x, 'asin'))


@_checked('acos')
def acos(x):
    return math.acos(_in_unit_interval(x, 'acos'))


@_checked('atan')
def atan(x):
    return math.atan(x)


@_checked('log')
def log(x):
    '''
    Common (base 10) logarithm.
    '''
    return math.log10(_positive(x, 'log'))


@_checked('ln')
def ln(x):
    return math.log(_positive(x, 'ln'))


@_checked('exp')
def exp(x):
    return math.exp(x)


@_checked('sqrt')
def sqrt(x):
    return math.sqrt(_non_negative(x, 'sqrt'))


@_checked('inv')
def inv(x):
    '''
    1/x.
    '''
    if x == 0.0:
        raise DivisionByZero('Division by zero')
    return 1.0 / x


def gamma(x):
    '''
    Recursive gamma, exact for the integer arguments factorial passes in.
    '''
    if x == 1.0:
        return 1.0
    if x < 1.0:
        return gamma(x + 1.0) / x
    return (x - 1.0) * gamma(x - 1.0)


@_checked('fact')
def factorial(x):
    '''
    x! for integers 0 through 170, via gamma(x + 1).
    '''
    if x < 0.0:
        raise MathError('Factorial requires non-negative input')
    if x > FACTORIAL_MAX:
        raise MathError('Factorial input must be <= {}'.format(FACTORIAL_MAX))
    if x != math.floor(x):
        raise MathError('Factorial requires integer input')
    return gamma(x + 1.0)


# Command name to function
FUNCTIONS = {
    'sin': sin,
    'cos': cos,
    'tan': tan,
    'asin': asin,
    'acos': acos,
    'atan': atan,
    'log': log,
    'ln': ln,
    'exp': exp,
    'sqrt': sqrt,
    'inv': inv,
    '!': factorial,
}

# What ARC turns a trigonometric function into
INVERSES = {
    'sin': 'asin',
    'cos': 'acos',
    'tan': 'atan',
}

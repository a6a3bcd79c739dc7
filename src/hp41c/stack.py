import math
import operator

from .util import DivisionByZero, MathError, wrap_user_errors


# Register indices
X, Y, Z, T = range(4)
NAMES = 'X', 'Y', 'Z', 'T'


@wrap_user_errors(MathError, 'Overflow')
def _power(y, x):
    # math.pow raises instead of returning complex for negative bases
    return math.pow(y, x)


class Stack:
    '''
    The four register (X, Y, Z, T) RPN stack of the HP-41C.

    X is the display register, T the top. Binary operations compute f(Y, X)
    and drop the stack HP style: the result lands in X, Z moves to Y, T moves
    to Z and T keeps its value, so T is duplicated rather than lost.

    The lift flag is advisory. The stack never lifts by itself on number
    entry; whoever starts a new number checks should_lift() and calls lift().
    '''

    def __init__(self):
        self.registers = [0.0] * 4
        self.lifted = False

    @property
    def x(self):
        return self.registers[X]

    @x.setter
    def x(self, value):
        self.registers[X] = value

    @property
    def y(self):
        return self.registers[Y]

    @property
    def z(self):
        return self.registers[Z]

    @property
    def t(self):
        return self.registers[T]

    def should_lift(self):
        return self.lifted

    def lift(self):
        '''
        X -> Y -> Z -> T. The old T is lost.
        '''
        self.registers[T] = self.registers[Z]
        self.registers[Z] = self.registers[Y]
        self.registers[Y] = self.registers[X]

    def push(self, value):
        '''
        Put value in X, lifting first if the lift flag is set.
        '''
        if self.lifted:
            self.lift()
        self.registers[X] = value
        self.lifted = True

    def _drop(self):
        self.registers[X] = self.registers[Y]
        self.registers[Y] = self.registers[Z]
        self.registers[Z] = self.registers[T]

    def _check(self, result):
        if math.isnan(result):
            raise MathError('Invalid calculation')
        if math.isinf(result):
            raise MathError('Overflow')
        return result

    def binary(self, function):
        '''
        Replace X and Y with function(Y, X) and drop the stack.

        Nothing moves unless the result is a finite number.
        '''
        result = self._check(function(self.registers[Y], self.registers[X]))
        self._drop()
        self.registers[X] = result
        self.lifted = True
        return result

    def unary(self, function):
        '''
        Replace X with function(X).
        '''
        result = self._check(function(self.registers[X]))
        self.registers[X] = result
        self.lifted = True
        return result

    def add(self):
        return self.binary(operator.add)

    def subtract(self):
        return self.binary(operator.sub)

    def multiply(self):
        return self.binary(operator.mul)

    def divide(self):
        if self.registers[X] == 0.0:
            raise DivisionByZero('Division by zero')
        return self.binary(operator.truediv)

    def power(self):
        return self.binary(_power)

    def swap(self):
        self.registers[X], self.registers[Y] = \
            self.registers[Y], self.registers[X]

    def clear_x(self):
        self.registers[X] = 0.0

    def clear_all(self):
        self.registers = [0.0] * 4
        self.lifted = False

    def change_sign(self):
        self.registers[X] = -self.registers[X]

    def snapshot(self):
        '''
        Copy of the registers, X first.
        '''
        return tuple(self.registers)

    def __str__(self):
        return ' '.join('{}:{:10.4f}'.format(NAMES[i], self.registers[i])
                        for i in reversed(range(4)))

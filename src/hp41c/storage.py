import math
import operator

from .util import InvalidRegister, RegisterArithmeticError


NUM_REGISTERS = 100

# Register arithmetic: R = R op X
OPERATIONS = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
}


class StorageRegisters:
    '''
    Fixed bank of directly addressed registers, zero on creation.
    '''

    def __init__(self, size=NUM_REGISTERS):
        self.cells = [0.0] * size

    def __len__(self):
        return len(self.cells)

    def index(self, register):
        '''
        Validate a register number given as an int or a digit string.
        '''
        try:
            number = int(register)
        except (TypeError, ValueError):
            raise InvalidRegister('Invalid register: {}'.format(register))
        if not 0 <= number < len(self.cells):
            raise InvalidRegister('Invalid register: {}'.format(number))
        return number

    def __getitem__(self, register):
        return self.cells[self.index(register)]

    def __setitem__(self, register, value):
        self.cells[self.index(register)] = value

    def store(self, register, value):
        self[register] = value

    def recall(self, register):
        return self[register]

    def arithmetic(self, register, op, value):
        '''
        Replace the register's contents with contents op value.
        '''
        number = self.index(register)
        if op == '/' and value == 0.0:
            raise RegisterArithmeticError('Division by zero in register {:02d}'
                                          .format(number))
        result = OPERATIONS[op](self.cells[number], value)
        if math.isnan(result) or math.isinf(result):
            raise RegisterArithmeticError('Overflow in register {:02d}'
                                          .format(number))
        self.cells[number] = result
        return result

import math
from enum import Enum

from .util import InvalidArgument


DEFAULT_WIDTH = 35
MAX_DIGITS = 9


class DisplayMode(Enum):
    FIX = 'FIX'
    SCI = 'SCI'
    ENG = 'ENG'


class DisplayFormatter:
    '''
    Renders numbers in FIX, SCI or ENG notation with a number of digits.

    FIX output that does not fit the width falls back to SCI, as the
    calculator does for numbers it cannot show in fixed notation.
    '''

    DEFAULT_MODE = DisplayMode.FIX
    DEFAULT_DIGITS = 4

    def __init__(self, mode=None, digits=None):
        self.mode = self.DEFAULT_MODE
        self.digits = self.DEFAULT_DIGITS
        self.set_mode(mode or self.DEFAULT_MODE,
                      self.DEFAULT_DIGITS if digits is None else digits)

    def set_mode(self, mode, digits):
        if isinstance(mode, str):
            try:
                mode = DisplayMode(mode.upper())
            except ValueError:
                raise InvalidArgument('Unknown display mode {!r}'.format(mode))
        if not 0 <= digits <= MAX_DIGITS:
            raise InvalidArgument('Invalid argument {!r} for {}'
                                  .format(digits, mode.value))
        self.mode = mode
        self.digits = digits

    def mode_string(self):
        return '{} {}'.format(self.mode.value, self.digits)

    def format_number(self, value, width=DEFAULT_WIDTH):
        if self.mode is DisplayMode.FIX:
            formatted = self._fix(value)
            if len(formatted) > width:
                formatted = self._sci(value)
        elif self.mode is DisplayMode.SCI:
            formatted = self._sci(value)
        else:
            formatted = self._eng(value)
        return formatted[:width]

    def _fix(self, value):
        return '{:.{}f}'.format(value, self.digits)

    def _sci(self, value):
        mantissa, exponent = '{:.{}e}'.format(value, self.digits).split('e')
        return '{}E{:+03d}'.format(mantissa, int(exponent))

    def _eng(self, value):
        if value == 0.0:
            return '{:.{}f}E+00'.format(0.0, self.digits)
        exponent = int(math.floor(math.log10(abs(value)) / 3.0)) * 3
        mantissa = round(value / 10.0 ** exponent, self.digits)
        if abs(mantissa) >= 1000.0:
            exponent += 3
            mantissa = round(value / 10.0 ** exponent, self.digits)
        return '{:.{}f}E{:+03d}'.format(mantissa, self.digits, exponent)

import math

from .util import InvalidDigit, InvalidNumber, NumberOverflow


MAX_ENTRY_LENGTH = 15
MAX_EEX_DIGITS = 3
CURSOR = '_'


class InputState:
    '''
    Number entry accumulator: mantissa digits, one decimal point, and an
    optional exponent typed after EEX.

    Every accepted keystroke reparses the whole entry, so the caller can
    mirror the value into X as the user types.
    '''

    def __init__(self):
        self.clear()

    def clear(self):
        self.entering = False
        self.mantissa = ''
        self.negative = False
        self.eex_mode = False
        self.eex_digits = ''
        self.eex_negative = False

    def begin_entry(self):
        self.clear()
        self.entering = True

    def enter_eex_mode(self):
        '''
        Start typing an exponent. Begins a "0" mantissa if no number is in
        progress.
        '''
        if not self.entering:
            self.begin_entry()
            self.mantissa = '0'
        self.eex_mode = True
        self.eex_digits = ''
        self.eex_negative = False

    def handle_digit(self, key):
        '''
        Accept a digit or decimal point.

        Returns the new value, or None when the keystroke changed nothing
        that parses (a second decimal point).
        '''
        if not (key.isdigit() and len(key) == 1 and key.isascii()) \
           and key != '.':
            raise InvalidDigit('Invalid digit: {!r}'.format(key))
        if not self.entering:
            self.begin_entry()
        if self.eex_mode:
            return self._exponent_digit(key)
        return self._mantissa_digit(key)

    def _mantissa_digit(self, key):
        if key == '.':
            if '.' in self.mantissa:
                return None
            if not self.mantissa:
                self.mantissa = '0'
            self.mantissa += '.'
            return self._parse()
        if len(self.mantissa) >= MAX_ENTRY_LENGTH:
            raise NumberOverflow('Number overflow')
        if self.mantissa == '0':
            self.mantissa = key
        else:
            self.mantissa += key
        return self._parse()

    def _exponent_digit(self, key):
        if key == '.':
            return None
        if len(self.eex_digits) >= MAX_EEX_DIGITS:
            raise NumberOverflow('Number overflow')
        self.eex_digits += key
        try:
            return self._parse()
        except NumberOverflow:
            self.eex_digits = self.eex_digits[:-1]
            raise

    def change_sign(self):
        '''
        Negate the exponent in EEX mode, the mantissa otherwise.
        '''
        if self.eex_mode:
            self.eex_negative = not self.eex_negative
        else:
            self.negative = not self.negative
        return self._parse()

    def handle_backspace(self):
        '''
        Remove the last typed character and return the value left behind,
        0.0 once the entry is gone.
        '''
        if self.eex_mode and self.eex_digits:
            self.eex_digits = self.eex_digits[:-1]
            if not self.eex_digits:
                self.eex_mode = False
        elif self.eex_mode:
            self.eex_mode = False
        elif self.mantissa:
            self.mantissa = self.mantissa[:-1]
            if not self.mantissa:
                self.clear()
                return 0.0
        else:
            self.clear()
            return 0.0
        try:
            value = self._parse()
        except (InvalidNumber, NumberOverflow):
            return 0.0
        return 0.0 if value is None else value

    def number_string(self):
        mantissa = self.mantissa or '0'
        if self.negative:
            mantissa = '-' + mantissa
        if self.eex_mode and self.eex_digits:
            return '{}E{}{}'.format(mantissa, '-' if self.eex_negative else '',
                                    self.eex_digits)
        return mantissa

    def _parse(self):
        text = self.number_string()
        try:
            value = float(text)
        except ValueError:
            if self.mantissa.endswith('.') and not self.eex_mode:
                return None
            raise InvalidNumber('Invalid number: {}'.format(text))
        if math.isinf(value):
            raise NumberOverflow('Number overflow')
        return value

    def display_string(self):
        if not self.entering:
            return ''
        display = ('-' if self.negative else '') + self.mantissa
        if self.eex_mode:
            display += ' E' + ('-' if self.eex_negative else '') + \
                self.eex_digits
        return display + CURSOR

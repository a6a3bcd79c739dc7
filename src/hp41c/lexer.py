from functools import reduce
import operator

import regex

from .util import HP41CError
from .calculator import (BACKSPACE, DELETE, ENTER, FLAGS_TOGGLE,
                         PROGRAM_TOGGLE, SPACE)


class Lexer:
    '''
    Lexer for keystroke scripts, a *regular* grammar.

    Every lexeme is one keystroke for Calculator.process_input. For
    consistency with the rest of the package, needs to be instantiated,
    despite holding no internal state.
    '''
    # Named keys, the ones with no printable character of their own
    CONTROL_KEYS = {
        'enter': ENTER,
        'bs': BACKSPACE,
        'backspace': BACKSPACE,
        'del': DELETE,
        'space': SPACE,
        'prgm': PROGRAM_TOGGLE,
        'flags': FLAGS_TOGGLE,
    }
    # <enter>, <bs>, ...
    CONTROL = r'''
               <
               (?<control>
                   ''' + r'|'.join(sorted(CONTROL_KEYS, key=len,
                                          reverse=True)) + r'''
               )
               >
               '''
    # 'MYPROG', delivered whole: XEQ names, whole command names
    ALPHA = r'''
             '
             (?<alpha>
                 [^']+
             )
             '
             '''
    # Anything else is a keystroke by itself: digits, letters, operators,
    # space. Quotes and angle brackets only ever open the above.
    KEY = r"[^'<]"

    # All possible lexemes.
    LEXEME = r'(?<control_key>' + CONTROL + r')|' \
             r'(?<alpha_key>' + ALPHA + r')|' \
             r'(?<key>' + KEY + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.IGNORECASE,
                    regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Doesn't yield incomplete or incorrect lexemes, stopping on first bad.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise HP41CError("Couldn't lex {0}".format(line.strip()))

    def matchedgroups(self, match):
        '''
        Return the innermost groups a lexeme matched.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value and not key.endswith('_key')}

    def keystroke(self, match):
        groups = self.matchedgroups(match)
        if 'control' in groups:
            return self.CONTROL_KEYS[groups['control'].lower()]
        if 'alpha' in groups:
            return groups['alpha']
        return groups['key']

    def keystrokes(self, line):
        '''
        Yield the keystrokes of a line.
        '''
        for match in self.lex(line):
            yield self.keystroke(match)

'''
Side channel for watching the calculator work.

The calculator calls an Observer on every state transition. The base class
ignores everything; LoggingObserver writes to the standard logging tree under
"hp41c", one child logger per category, so categories are switched on and
off with logger levels.
'''

import logging


CATEGORIES = 'input', 'flags', 'stack', 'commands', 'programming', 'storage'

PRESETS = {
    'all': CATEGORIES,
    'minimal': ('flags', 'stack'),
    'off': (),
}


def _registers(registers):
    x, y, z, t = registers
    return 'T:{:10.4f} Z:{:10.4f} Y:{:10.4f} X:{:10.4f}'.format(t, z, y, x)


class Observer:
    def keystroke(self, key):
        pass

    def flag_changed(self, name, old, new):
        pass

    def stack_changed(self, operation, before, after):
        pass

    def parser_state(self, state, context):
        pass

    def command_executed(self, command, args, result):
        pass

    def programming(self, operation, details):
        pass

    def storage(self, operation, register, value):
        pass

    def input_state(self, entering, eex_mode, display):
        pass

    def error(self, error):
        pass


class LoggingObserver(Observer):
    def __init__(self, name='hp41c'):
        self.name = name
        self.loggers = {category: logging.getLogger(name + '.' + category)
                        for category in CATEGORIES}

    def configure(self, preset):
        '''
        Enable exactly the categories of a preset: all, minimal or off.
        '''
        try:
            enabled = PRESETS[preset]
        except KeyError:
            raise ValueError('Unknown logging preset {!r}'.format(preset))
        for category, logger in self.loggers.items():
            logger.setLevel(logging.DEBUG if category in enabled
                            else logging.CRITICAL)

    def config_string(self):
        active = [category.upper()
                  for category, logger in self.loggers.items()
                  if logger.isEnabledFor(logging.DEBUG)]
        return 'Logging: ' + ('|'.join(active) or 'NONE')

    def keystroke(self, key):
        self.loggers['input'].debug('Key: %r', key)

    def flag_changed(self, name, old, new):
        self.loggers['flags'].debug('%s changed: %s -> %s', name, old, new)

    def stack_changed(self, operation, before, after):
        logger = self.loggers['stack']
        if before == after or not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug('Operation: %s', operation)
        logger.debug('  Before: %s', _registers(before))
        logger.debug('  After:  %s', _registers(after))

    def parser_state(self, state, context):
        self.loggers['commands'].debug('%s: %s', context, state)

    def command_executed(self, command, args, result):
        self.loggers['commands'].debug('Execute: %s%s -> %s', command,
                                       ' ' + ' '.join(args) if args else '',
                                       result)

    def programming(self, operation, details):
        self.loggers['programming'].debug('%s: %s', operation, details)

    def storage(self, operation, register, value):
        self.loggers['storage'].debug('%s register %02d: %s', operation,
                                      register, value)

    def input_state(self, entering, eex_mode, display):
        self.loggers['flags'].debug("Input: entering=%s, eex=%s, display='%s'",
                                    entering, eex_mode, display)

    def error(self, error):
        self.loggers['commands'].warning('%s', error)

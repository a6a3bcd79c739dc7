'''
Keystroke-by-keystroke command recognizer.

Each add_input() call receives one keystroke and answers Incomplete (keep
typing), Complete (run this command) or Invalid (keystroke rejected, state
unchanged). Typing "fix 4":

    f -> Incomplete   (building "f...")
    i -> Incomplete   (building "fi...")
    x -> Incomplete   ("fix" known, waiting for its digit)
    4 -> Complete('fix', ['4'])
'''

from collections import namedtuple

from .registry import REGISTRY, ArgumentPattern, AutoExecute


Incomplete = namedtuple('Incomplete', [])
Complete = namedtuple('Complete', ['command', 'args'])
Invalid = namedtuple('Invalid', ['reason'])

INCOMPLETE = Incomplete()

# Placeholder shown while waiting for an argument
_PLACEHOLDERS = {
    ArgumentPattern.REGISTER: '__',
}


class CommandParser:
    '''
    Builds a command name, then its arguments, one keystroke at a time.

    current_command is always empty, a registered name, or a strict prefix
    of one.
    '''

    def __init__(self, registry=REGISTRY):
        self.registry = registry
        self.clear()

    def clear(self):
        self.current_command = ''
        self.current_args = []

    def is_building(self):
        return bool(self.current_command)

    def spec(self):
        '''
        Spec of the committed command, None while only a prefix is typed.
        '''
        if not self.current_command:
            return None
        return self.registry.get(self.current_command)

    def awaiting_arguments(self):
        return self.spec() is not None

    def add_input(self, key):
        if not self.current_command:
            return self._name(key.lower())
        if self.spec() is not None:
            return self._argument(key)
        return self._name(self.current_command + key.lower())

    def _name(self, name):
        spec = self.registry.get(name)
        if spec is not None:
            if not spec.takes_arguments():
                self.clear()
                return Complete(spec.name, None)
            self.current_command = spec.name
            return INCOMPLETE
        if self.registry.is_prefix(name):
            self.current_command = name
            return INCOMPLETE
        return Invalid('Unknown command: {}'.format(name))

    def _argument(self, key):
        spec = self.spec()
        if not spec.accepts(key):
            if spec.pattern is ArgumentPattern.REGISTER:
                return Invalid("Register number must be digits, got '{}'"
                               .format(key))
            return Invalid("Invalid argument '{}' for {}"
                           .format(key, spec.name))
        if spec.pattern is ArgumentPattern.REGISTER:
            return self._register_digit(spec, key)
        self.current_args.append(key)
        if spec.auto_execute is AutoExecute.ON_COMPLETE:
            return self._complete()
        return INCOMPLETE

    def _register_digit(self, spec, digit):
        # Never complete on the first digit
        if not self.current_args:
            self.current_args.append(digit)
            return INCOMPLETE
        register = self.current_args[0] + digit
        if int(register) > 99:
            return Invalid('Register number {} too large (max 99)'
                           .format(register))
        self.current_args[0] = register
        if spec.auto_execute is AutoExecute.ON_COMPLETE:
            return self._complete()
        return INCOMPLETE

    def _complete(self):
        result = Complete(self.current_command,
                          list(self.current_args) or None)
        self.clear()
        return result

    def force_complete(self):
        '''
        Package whatever has been typed as a command, even if it is short of
        arguments. Execution must not trust the argument count.
        '''
        if not self.current_command:
            return Invalid('No command to complete')
        return self._complete()

    def backspace(self):
        '''
        Undo the last keystroke. Returns False if nothing was being built.
        '''
        if self.current_args:
            last = self.current_args[-1][:-1]
            if last:
                self.current_args[-1] = last
            else:
                self.current_args.pop()
        elif self.current_command:
            self.current_command = self.current_command[:-1]
        else:
            return False
        return True

    def state(self):
        '''
        Human readable state: "CMD: [sto 1_]".
        '''
        spec = self.spec()
        if not self.current_command:
            shown = ''
        elif spec is None:
            shown = self.current_command
        elif not self.current_args:
            shown = '{} {}'.format(self.current_command,
                                   _PLACEHOLDERS.get(spec.pattern, '_'))
        elif spec.pattern is ArgumentPattern.REGISTER and \
                len(self.current_args[0]) == 1:
            shown = '{} {}_'.format(self.current_command,
                                    self.current_args[0])
        else:
            shown = '{} {}'.format(self.current_command,
                                   ' '.join(self.current_args))
        return 'CMD: [{}]'.format(shown)

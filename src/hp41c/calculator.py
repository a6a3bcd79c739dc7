import math

from . import functions
from .display import DisplayFormatter
from .entry import InputState
from .observer import Observer
from .parser import CommandParser, Complete, Incomplete
from .programming import END, ProgrammingMode
from .registry import REGISTRY
from .stack import Stack
from .storage import StorageRegisters
from .util import (HP41CError, InvalidArgument, LabelNotFound,
                   MissingArgument, NoProgram, NotAllowed, UnknownCommand)


# Named keystrokes
ENTER = 'enter'
SPACE = ' '
BACKSPACE = '\b'
DELETE = '\x7f'
PROGRAM_TOGGLE = ':'
FLAGS_TOGGLE = 'F'

NUMBER_KEYS = frozenset('0123456789.')


def _first_argument(command, args):
    if not args or not args[0]:
        raise MissingArgument('{} requires argument'.format(command.upper()))
    return args[0]


# Command factories. Each returns an unbound command taking (calculator, args)
# and returning an optional message.

def _arithmetic(operation):
    def command(self, args):
        getattr(self.stack, operation)()
    command.__name__ = operation
    return command


def _function(name):
    def command(self, args):
        if self.arc and name in functions.INVERSES:
            self.stack.unary(functions.FUNCTIONS[functions.INVERSES[name]])
        else:
            self.stack.unary(functions.FUNCTIONS[name])
    command.__name__ = name
    return command


def _display_mode(mode):
    def command(self, args):
        digits = _first_argument(mode, args)
        if not (len(digits) == 1 and digits in '0123456789'):
            raise InvalidArgument("Invalid argument '{}' for {}"
                                  .format(digits, mode.upper()))
        self.display.set_mode(mode, int(digits))
        return self.display.mode_string()
    command.__name__ = mode
    return command


def _register_arithmetic(op):
    def command(self, args):
        register = self.storage.index(_first_argument('st' + op, args))
        value = self.storage.arithmetic(register, op, self.stack.x)
        self.observer.storage('ST' + op, register, value)
        return 'ST{} {:02d}'.format(op, register)
    command.__name__ = 'st' + op
    return command


class Calculator:
    '''
    HP-41C emulation: routes keystrokes to number entry or the command
    parser, runs completed commands against the stack, storage, display and
    program memory, and renders the display.

    Every failure is raised as an HP41CError and leaves the calculator ready
    for the next keystroke.
    '''

    NUM_REGISTERS = 100
    MAX_RUN_STEPS = 10000

    # Editing commands that act on program memory in programming mode
    # instead of being recorded
    EDITOR_COMMANDS = frozenset(['sst', 'bst', 'del', 'prgm'])
    # Commands that do not end number entry
    KEEPS_ENTRY = frozenset(['eex', 'chs', 'sst'])
    # Commands that end number entry with stack lift disabled; every other
    # command ending it enables lift
    DISABLES_LIFT = frozenset(['enter', 'clx'])

    REFERENCE = (
        'sin cos tan asin acos atan log ln exp sqrt',
        'pi inv arc  clx clr chs  +/-*^ ! \N{ERASE TO THE LEFT}  '
        ': fix sci eng sto rcl  F(flags)',
    )
    REFERENCE_FLAGS = (
        REFERENCE[0],
        'pi inv arc  clx clr chs  +/-*^ ! \N{ERASE TO THE LEFT}  '
        ': lbl gto xeq sto rcl  F',
    )

    def __init__(self, *, display_mode=None, digits=None, observer=None,
                 max_steps=None):
        self.stack = Stack()
        self.input = InputState()
        self.parser = CommandParser()
        self.programming = ProgrammingMode()
        self.display = DisplayFormatter(display_mode, digits)
        self.storage = StorageRegisters(self.NUM_REGISTERS)
        self.observer = observer or Observer()
        self.max_steps = max_steps or self.MAX_RUN_STEPS
        self.show_flags = False
        self.arc = False

    def process_input(self, key):
        '''
        Process one keystroke. Returns an optional message.
        '''
        self.observer.keystroke(key)
        try:
            return self._route(key)
        except HP41CError as e:
            self.observer.error(e)
            raise

    def _route(self, key):
        if key == PROGRAM_TOGGLE:
            return self.toggle_programming_mode()
        if key == FLAGS_TOGGLE:
            return self.toggle_flags()
        if key in (BACKSPACE, DELETE):
            return self._backspace()
        if key in NUMBER_KEYS:
            if self.parser.is_building():
                return self._parsed(self.parser.add_input(key))
            if self.programming.is_programming:
                self._record(key, None)
                return None
            self._number(key)
            return None
        if key == ENTER:
            if self.parser.is_building():
                return self._parsed(self.parser.force_complete())
            return self._complete(ENTER, None)
        if key == SPACE:
            if not self.parser.is_building() or \
               self.parser.awaiting_arguments() and \
               not self.parser.current_args:
                return None
            return self._parsed(self.parser.force_complete())
        return self._parsed(self.parser.add_input(key))

    def _parsed(self, result):
        if isinstance(result, Incomplete):
            self.observer.parser_state(self.parser.state(), 'Building')
            return None
        if isinstance(result, Complete):
            return self._complete(result.command, result.args)
        if self.parser.awaiting_arguments():
            raise InvalidArgument(result.reason)
        raise UnknownCommand(result.reason)

    def _complete(self, command, args):
        if self.programming.is_programming and \
           command not in self.EDITOR_COMMANDS:
            self._record(command, args)
            return None
        return self.execute(command, args)

    def _record(self, command, args):
        if command not in NUMBER_KEYS:
            spec = REGISTRY.get(command)
            if spec is None:
                raise UnknownCommand('Unknown command: {}'.format(command))
            if spec.takes_arguments():
                _first_argument(command, args)
        self.programming.add_instruction(command, args)
        self.observer.programming(
            'Record', self.programming.program[
                self.programming.edit_position - 1].listing())

    def _number(self, key):
        if not self.input.entering and self.stack.should_lift():
            self.stack.lift()
        value = self.input.handle_digit(key)
        self.stack.lifted = False
        if value is not None:
            self.stack.x = value
        self.observer.input_state(self.input.entering, self.input.eex_mode,
                                  self.input.display_string())

    def _backspace(self):
        if self.parser.is_building():
            self.parser.backspace()
            self.observer.parser_state(self.parser.state(), 'Backspace')
        elif self.input.entering:
            self.stack.x = self.input.handle_backspace()
            if not self.input.entering:
                self.stack.lifted = False
            self.observer.input_state(self.input.entering,
                                      self.input.eex_mode,
                                      self.input.display_string())
        return None

    def toggle_programming_mode(self):
        self.parser.clear()
        self.input.clear()
        old = self.programming.is_programming
        new = self.programming.toggle_programming_mode()
        self.observer.flag_changed('programming', old, new)
        return 'Programming mode ON' if new else 'Programming mode OFF'

    def toggle_flags(self):
        self.show_flags = not self.show_flags
        self.observer.flag_changed('show_flags', not self.show_flags,
                                   self.show_flags)
        return None

    def execute(self, command, args=None):
        '''
        Run a named command with optional arguments, bypassing the parser.
        '''
        command = command.lower()
        try:
            handler = self.COMMANDS[command]
        except KeyError:
            raise UnknownCommand('Unknown command: {}'.format(command))
        before = self.stack.snapshot()
        try:
            message = handler(self, args)
        finally:
            if command != 'arc':
                self.arc = False
        if command not in self.KEEPS_ENTRY:
            if self.input.entering and command not in self.DISABLES_LIFT:
                self.stack.lifted = True
            self.input.clear()
        self.observer.stack_changed(command, before, self.stack.snapshot())
        self.observer.command_executed(command, args, message)
        return message

    # Program execution

    def run(self):
        '''
        Run from the program counter until a top level RTN, an RS step, the
        end of the program, or the step limit.
        '''
        if self.programming.is_programming:
            raise NotAllowed('Cannot run a program in programming mode')
        if not self.programming.program:
            raise NoProgram('No program in memory')
        self.programming.is_running = True
        self.observer.programming('Run', 'from line {:02d}'.format(
            self.programming.program_counter + 1))
        try:
            for _ in range(self.max_steps):
                if not self.programming.is_running:
                    return None
                instruction = self.programming.fetch()
                if instruction is None:
                    self.programming.program_counter = 0
                    return None
                self._execute_instruction(instruction)
            if self.programming.is_running:
                return 'Interrupted at line {:02d}'.format(
                    self.programming.program_counter + 1)
            return None
        finally:
            self.programming.is_running = False
            self.programming.subroutine_stack = []

    def _execute_instruction(self, instruction):
        self.observer.programming('Step', instruction.listing())
        command = instruction.command.lower()
        if command in NUMBER_KEYS:
            self._number(command)
        else:
            self.execute(command, instruction.arguments or None)

    # Commands

    def _enter(self, args):
        self.stack.lift()
        self.stack.lifted = False

    def _swap(self, args):
        self.stack.swap()

    def _clx(self, args):
        self.stack.clear_x()
        self.stack.lifted = False

    def _clr(self, args):
        self.stack.clear_all()

    def _chs(self, args):
        if self.input.entering:
            value = self.input.change_sign()
            if value is not None:
                self.stack.x = value
        else:
            self.stack.change_sign()

    def _pi(self, args):
        self.stack.push(math.pi)

    def _eex(self, args):
        if not self.input.entering:
            if self.stack.should_lift():
                self.stack.lift()
            self.stack.lifted = False
            self.stack.x = 0.0
        self.input.enter_eex_mode()

    def _arc(self, args):
        self.arc = not self.arc

    def _sto(self, args):
        register = self.storage.index(_first_argument('sto', args))
        self.storage.store(register, self.stack.x)
        self.observer.storage('STO', register, self.stack.x)
        return 'STO {:02d}'.format(register)

    def _rcl(self, args):
        register = self.storage.index(_first_argument('rcl', args))
        self.stack.push(self.storage.recall(register))
        self.observer.storage('RCL', register, self.stack.x)
        return 'RCL {:02d}'.format(register)

    def _lbl(self, args):
        # Labels only mark lines; running over one does nothing
        _first_argument('lbl', args)

    def _gto(self, args):
        label = _first_argument('gto', args)
        if not self.programming.goto_label(label):
            raise LabelNotFound('Label {} not found'.format(label.upper()))

    def _xeq(self, args):
        label = _first_argument('xeq', args)
        if self.programming.is_running:
            if not self.programming.execute_subroutine(label):
                raise LabelNotFound('Label {} not found'.format(label.upper()))
            return None
        self.programming.subroutine_stack = []
        if not self.programming.goto_label(label):
            raise LabelNotFound('Label {} not found'.format(label.upper()))
        return self.run()

    def _rtn(self, args):
        if self.programming.is_running:
            self.programming.return_from_subroutine()
        else:
            self.programming.subroutine_stack = []
            self.programming.program_counter = 0

    def _rs(self, args):
        if self.programming.is_running:
            self.programming.is_running = False
            return None
        return self.run()

    def _sst(self, args):
        if self.programming.is_programming:
            return self.programming.sst_edit()
        if not self.programming.program:
            raise NoProgram('No program in memory')
        instruction = self.programming.fetch()
        if instruction is None:
            self.programming.program_counter = 0
            self.programming.subroutine_stack = []
            return END
        # Stepped XEQ and RTN call and return as they would in a run
        self.programming.is_running = True
        try:
            self._execute_instruction(instruction)
        finally:
            self.programming.is_running = False
        return 'SST: {}'.format(instruction.listing())

    def _bst(self, args):
        if self.programming.is_programming:
            return self.programming.bst_edit()
        if not self.programming.program:
            raise NoProgram('No program in memory')
        return self.programming.bst_execute()

    def _del(self, args):
        return self.programming.delete_current_instruction()

    def _prgm(self, args):
        self.programming.clear_program()
        return 'Program cleared'

    COMMANDS = {
        '+': _arithmetic('add'),
        '-': _arithmetic('subtract'),
        '*': _arithmetic('multiply'),
        '/': _arithmetic('divide'),
        '^': _arithmetic('power'),
        '!': _function('!'),
        'enter': _enter,
        'swap': _swap,
        'clx': _clx,
        'clr': _clr,
        'chs': _chs,
        'pi': _pi,
        'eex': _eex,
        'arc': _arc,
        'fix': _display_mode('fix'),
        'sci': _display_mode('sci'),
        'eng': _display_mode('eng'),
        'sto': _sto,
        'rcl': _rcl,
        'st+': _register_arithmetic('+'),
        'st-': _register_arithmetic('-'),
        'st*': _register_arithmetic('*'),
        'st/': _register_arithmetic('/'),
        'lbl': _lbl,
        'gto': _gto,
        'xeq': _xeq,
        'rtn': _rtn,
        'rs': _rs,
        'sst': _sst,
        'bst': _bst,
        'del': _del,
        'prgm': _prgm,
    }
    COMMANDS.update({name: _function(name)
                     for name in ['sin', 'cos', 'tan', 'asin', 'acos', 'atan',
                                  'log', 'ln', 'exp', 'sqrt', 'inv']})

    # Display

    def registers(self):
        '''
        X, Y, Z, T.
        '''
        return self.stack.snapshot()

    def stack_lines(self):
        lines = []
        for name, value in zip('TZYX', reversed(self.stack.snapshot())):
            if name == 'X' and self.input.entering:
                shown = self.input.display_string()
            else:
                shown = self.display.format_number(value)
            lines.append('{}: {}'.format(name, shown))
        return lines

    def status_line(self):
        parts = [self.parser.state()]
        if self.show_flags:
            parts.append('EN:{:d}'.format(self.input.entering))
            parts.append('EEX:{:d}'.format(self.input.eex_mode))
            parts.append('SL:{:d}'.format(self.stack.should_lift()))
        if self.arc:
            parts.append('ARC')
        parts.append(self.display.mode_string())
        if self.programming.is_programming:
            parts.append('PRGM')
            parts.append('L{:02d}'.format(self.programming.current_line))
        if self.programming.is_running:
            parts.append('RUN')
        return ' '.join(parts)

    def program_line(self):
        if self.programming.is_programming:
            return '>' + self.programming.step_display()
        if not self.programming.program:
            return ''
        instruction = self.programming.current_instruction()
        if instruction is not None:
            return ' ' + instruction.listing()
        return ' {:02d} END'.format(self.programming.program_counter + 1)

    def get_display(self):
        '''
        Multi-line snapshot: stack, status, program step, command reference.
        '''
        lines = self.stack_lines()
        lines.append(self.status_line())
        lines.append(self.program_line())
        lines.extend(self.REFERENCE_FLAGS if self.show_flags
                     else self.REFERENCE)
        return '\n'.join(lines)

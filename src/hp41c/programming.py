from .util import (InvalidLine, MemoryFull, NotAllowed,
                   SubroutineStackOverflow)


MAX_PROGRAM_STEPS = 999
MAX_SUBROUTINE_DEPTH = 6
END = '.END.'


class ProgramInstruction:
    '''
    One program step. line_number is 1-based and kept dense by renumbering.
    '''

    def __init__(self, line_number, command, arguments=None):
        self.line_number = line_number
        self.command = command
        self.arguments = list(arguments or [])

    def __str__(self):
        return ' '.join([self.command] + self.arguments)

    def __repr__(self):
        return 'ProgramInstruction({!r}, {!r}, {!r})'.format(
            self.line_number, self.command, self.arguments)

    def __eq__(self, other):
        if not isinstance(other, ProgramInstruction):
            return NotImplemented
        return (self.line_number, self.command, self.arguments) == \
            (other.line_number, other.command, other.arguments)

    def listing(self):
        return '{:02d} {}'.format(self.line_number, self)


class ProgrammingMode:
    '''
    Program memory plus the cursors into it.

    program_counter is where execution is; edit_position is where the next
    keyed step goes in programming mode. Both are plain indices into
    program. labels maps a label name to its line number and is rebuilt from
    the program after every change, never edited directly.
    '''

    def __init__(self, max_steps=MAX_PROGRAM_STEPS,
                 max_depth=MAX_SUBROUTINE_DEPTH):
        self.max_steps = max_steps
        self.max_depth = max_depth
        self.program = []
        self.labels = {}
        self.program_counter = 0
        self.edit_position = 0
        self.subroutine_stack = []
        self.is_programming = False
        self.is_running = False

    @property
    def current_line(self):
        '''
        Line number the edit cursor is on.
        '''
        return self.edit_position + 1

    def toggle_programming_mode(self):
        self.is_programming = not self.is_programming
        if self.is_programming:
            self.edit_position = len(self.program)
        else:
            self.rebuild_label_table()
        return self.is_programming

    def add_instruction(self, command, arguments=None):
        '''
        Insert a step at the edit cursor and move past it.

        Returns False, adding nothing, outside programming mode.
        '''
        if not self.is_programming:
            return False
        if len(self.program) >= self.max_steps:
            raise MemoryFull('Program memory full')
        instruction = ProgramInstruction(
            self.current_line, command.upper(),
            [argument.upper() for argument in arguments or []])
        self.program.insert(self.edit_position, instruction)
        self.edit_position += 1
        self._renumber()
        return True

    def delete_current_instruction(self):
        if not self.is_programming:
            raise NotAllowed('DEL only in programming mode')
        if self.edit_position >= len(self.program):
            raise InvalidLine('No instruction to delete at line {:02d}'
                              .format(self.current_line))
        deleted = self.program.pop(self.edit_position)
        self._renumber()
        if self.edit_position < len(self.program):
            return 'Deleted: {} | Now: {}'.format(
                deleted, self.program[self.edit_position].listing())
        return 'Deleted: {} | At end'.format(deleted)

    def _renumber(self):
        for i, instruction in enumerate(self.program, start=1):
            instruction.line_number = i
        if self.program_counter > len(self.program):
            self.program_counter = len(self.program)
        self.rebuild_label_table()

    def rebuild_label_table(self):
        self.labels = {}
        for instruction in self.program:
            if instruction.command == 'LBL' and instruction.arguments:
                self.labels.setdefault(instruction.arguments[0],
                                       instruction.line_number)

    def goto_label(self, label):
        '''
        Move the active cursor to the label's line, or the first surviving
        line after it. Returns False for an unknown label.
        '''
        target = self.labels.get(label.upper())
        if target is None:
            return False
        for i, instruction in enumerate(self.program):
            if instruction.line_number >= target:
                if self.is_programming:
                    self.edit_position = i
                else:
                    self.program_counter = i
                return True
        return False

    def execute_subroutine(self, label):
        '''
        goto_label, remembering where to come back to.
        '''
        if len(self.subroutine_stack) >= self.max_depth:
            raise SubroutineStackOverflow('Subroutine stack overflow')
        return_address = self.program_counter
        if not self.goto_label(label):
            return False
        self.subroutine_stack.append(return_address)
        return True

    def return_from_subroutine(self):
        '''
        Pop the return address. An empty stack is a top level return, which
        stops the program.
        '''
        if self.subroutine_stack:
            self.program_counter = self.subroutine_stack.pop()
            return True
        self.is_running = False
        return False

    def clear_program(self):
        self.program = []
        self.labels = {}
        self.program_counter = 0
        self.edit_position = 0
        self.subroutine_stack = []
        self.is_running = False

    def current_instruction(self):
        '''
        Step under the active cursor, None at the end.
        '''
        position = self.edit_position if self.is_programming \
            else self.program_counter
        if position < len(self.program):
            return self.program[position]
        return None

    def fetch(self):
        '''
        Return the step at the program counter and advance past it; None at
        the end of the program.
        '''
        if self.program_counter >= len(self.program):
            return None
        instruction = self.program[self.program_counter]
        self.program_counter += 1
        return instruction

    def step_display(self):
        instruction = self.current_instruction()
        if instruction is not None:
            return instruction.listing()
        if self.is_programming:
            return '{:02d} {}'.format(self.current_line, END)
        return END

    def sst_edit(self):
        if self.edit_position < len(self.program):
            self.edit_position += 1
        return self.step_display()

    def bst_edit(self):
        if self.edit_position == 0:
            return 'Beginning of program'
        self.edit_position -= 1
        return self.step_display()

    def bst_execute(self):
        if self.program_counter == 0:
            return 'Beginning of program'
        self.program_counter -= 1
        return 'BST: {}'.format(self.program[self.program_counter].listing())

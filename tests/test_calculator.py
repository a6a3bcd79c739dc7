'''
Keystroke level calculator tests
'''

import math

from hp41c.calculator import Calculator
from hp41c.registry import REGISTRY
from hp41c.util import (DivisionByZero, InvalidArgument, LabelNotFound,
                        MathError, MemoryFull, MissingArgument, NoProgram,
                        NotAllowed, RegisterArithmeticError,
                        SubroutineStackOverflow, UnknownCommand)

from pytest import approx, raises


def test_every_command_has_a_handler():
    assert set(REGISTRY.names()) == set(Calculator.COMMANDS)


def test_basic_arithmetic(calculator, press):
    press('5<enter>3+')
    assert calculator.stack.x == 8.0


def test_spelled_out_enter(calculator, press):
    press('5 enter 3 -')
    assert calculator.stack.x == 2.0


def test_stack_lift_chain(calculator, press):
    press('1<enter>2<enter>3<enter>4')
    assert calculator.registers() == (4.0, 3.0, 2.0, 1.0)


def test_division_by_zero(calculator, press):
    press('5<enter>0')
    before = calculator.registers()
    with raises(DivisionByZero):
        press('/')
    assert calculator.registers() == before
    # Still usable
    press('+')
    assert calculator.stack.x == 5.0


def test_binary_keeps_t(calculator, press):
    press('1<enter>2<enter>3<enter>4*')
    assert calculator.registers() == (12.0, 2.0, 1.0, 1.0)


def test_sto_rcl_round_trip(calculator):
    for register in ['00', '07', '42', '99']:
        for lifted in [True, False]:
            for value in [0.0, -1.5, 6.02e23]:
                calculator.stack.registers = [value, 2.0, 3.0, 4.0]
                calculator.stack.lifted = lifted
                calculator.execute('sto', [register])
                calculator.execute('clx')
                calculator.stack.x = value + 1.0
                calculator.stack.lifted = lifted
                calculator.execute('rcl', [register])
                if lifted:
                    expected = (value, value + 1.0, 2.0, 3.0)
                else:
                    expected = (value, 2.0, 3.0, 4.0)
                assert calculator.registers() == expected


def test_sto_rcl_keystrokes(calculator, press):
    assert press('42sto05') == 'STO 05'
    press('clx')
    assert press('rcl05') == 'RCL 05'
    assert calculator.stack.x == 42.0


def test_typed_number_lifted_after_command(calculator, press):
    press('5sto01 3')
    assert calculator.registers()[:2] == (3.0, 5.0)


def test_rcl_replaces_number_being_typed(calculator, press):
    calculator.storage[1] = 7.0
    press('1<enter>2<enter>3<enter>5')
    assert not calculator.stack.should_lift()
    press('rcl01')
    assert calculator.registers() == (7.0, 3.0, 2.0, 1.0)
    press('8pi')
    assert calculator.registers() == (math.pi, 3.0, 2.0, 1.0)
    press('rcl01')
    assert calculator.registers() == (7.0, math.pi, 3.0, 2.0)


def test_fix_idempotent(calculator, press):
    assert press('fix4') == 'FIX 4'
    once = calculator.display.mode, calculator.display.digits
    press('fix4')
    assert (calculator.display.mode, calculator.display.digits) == once


def test_display_modes(calculator, press):
    press('12345.678sci2')
    assert calculator.stack_lines()[-1] == 'X: 1.23E+04'
    press('eng3')
    assert calculator.stack_lines()[-1] == 'X: 12.346E+03'


def test_display_mode_argument_errors(calculator):
    with raises(MissingArgument):
        calculator.execute('fix')
    with raises(InvalidArgument):
        calculator.execute('fix', ['x'])
    assert calculator.execute('FIX', ['2']) == 'FIX 2'


def test_unknown_command(calculator, press):
    with raises(UnknownCommand, match='siz'):
        press('siz')
    assert calculator.parser.state() == 'CMD: [si]'
    calculator.parser.clear()
    with raises(UnknownCommand):
        press('q')
    with raises(UnknownCommand):
        calculator.execute('nope')


def test_invalid_argument_keeps_command(calculator, press):
    press('7sto')
    with raises(InvalidArgument, match='digits'):
        press('x')
    assert press('12') == 'STO 12'
    assert calculator.storage[12] == 7.0


def test_space_separates_and_completes(calculator, press):
    press('9sto 5 ')
    assert calculator.storage[5] == 9.0
    assert not calculator.parser.is_building()


def test_enter_completes_pending_command(calculator, press):
    press('3<enter>9sto5<enter>')
    assert calculator.storage[5] == 9.0
    # Completing did not lift
    assert calculator.registers() == (9.0, 3.0, 0.0, 0.0)
    with raises(MissingArgument):
        press('sto<enter>')
    with raises(UnknownCommand):
        press('en<enter>')


def test_math_functions(calculator, press):
    press('16sqrt')
    assert calculator.stack.x == 4.0
    press('inv')
    assert calculator.stack.x == 0.25
    press('5!')
    assert calculator.stack.x == 120.0
    assert calculator.stack.y == 0.25


def test_math_error_keeps_x(calculator, press):
    press('2chs')
    with raises(MathError, match='positive'):
        press('ln')
    assert calculator.stack.x == -2.0


def test_arc(calculator, press):
    press('0.5arc')
    assert 'ARC' in calculator.status_line()
    press('sin')
    assert calculator.stack.x == approx(math.pi / 6)
    assert not calculator.arc


def test_arc_cleared_by_other_commands(calculator, press):
    press('1arc<enter>sin')
    assert calculator.stack.x == approx(math.sin(1.0))


def test_chs_during_entry(calculator, press):
    press('12chs3')
    assert calculator.stack.x == -123.0
    assert calculator.input.entering


def test_chs_after_entry(calculator, press):
    press('5<enter>chs')
    assert calculator.registers()[:2] == (-5.0, 5.0)


def test_eex(calculator, press):
    press('1.5eex2')
    assert calculator.stack.x == 150.0
    assert calculator.stack_lines()[-1] == 'X: 1.5 E2_'
    press('chs')
    assert calculator.stack.x == 0.015


def test_eex_lifts_fresh_number(calculator, press):
    press('7<enter>+eex2')
    assert calculator.stack.y == 14.0
    assert calculator.stack_lines()[-1] == 'X: 0 E2_'


def test_clx_disables_lift(calculator, press):
    press('5<enter>3clx7+')
    assert calculator.stack.x == 12.0


def test_swap_and_clear(calculator, press):
    press('1<enter>2swap')
    assert calculator.registers()[:2] == (1.0, 2.0)
    press('clr')
    assert calculator.registers() == (0.0, 0.0, 0.0, 0.0)


def test_backspace_edits_entry(calculator, press):
    press('12<bs>')
    assert calculator.stack.x == 1.0
    press('<bs>')
    assert calculator.stack.x == 0.0
    assert not calculator.input.entering
    assert not calculator.stack.should_lift()
    press('5')
    assert calculator.registers() == (5.0, 0.0, 0.0, 0.0)


def test_backspace_edits_command(calculator, press):
    press('st')
    press('<bs>')
    assert calculator.parser.state() == 'CMD: [s]'
    press('in')
    assert not calculator.parser.is_building()


def test_register_arithmetic(calculator, press):
    press('10sto01 3')
    assert press('st+01') == 'ST+ 01'
    assert calculator.storage[1] == 13.0
    assert calculator.stack.x == 3.0
    press('2st*01')
    assert calculator.storage[1] == 26.0
    press('0')
    with raises(RegisterArithmeticError):
        press('st/01')
    assert calculator.storage[1] == 26.0


def test_programming_mode_records(calculator, press):
    assert press(':') == 'Programming mode ON'
    press('lblA<enter>*rtn')
    assert [step.listing() for step in calculator.programming.program] == \
        ['01 LBL A', '02 ENTER', '03 *', '04 RTN']
    assert calculator.registers() == (0.0, 0.0, 0.0, 0.0)
    assert 'PRGM L05' in calculator.status_line()
    assert calculator.program_line() == '>05 .END.'
    assert press(':') == 'Programming mode OFF'
    assert calculator.programming.labels == {'A': 1}


def test_run_program(calculator, press):
    press(':lblA<enter>*rtn:')
    press('3xeqA')
    assert calculator.stack.x == 9.0
    assert not calculator.programming.is_running


def test_program_digits_and_subroutines(calculator, press):
    press(':lblAxeqB1+rtnlblB2*rtn:')
    press('5xeqA')
    assert calculator.stack.x == 11.0
    assert calculator.programming.subroutine_stack == []


def test_subroutine_overflow(calculator, press):
    press(':lblAxeqA:')
    with raises(SubroutineStackOverflow):
        press('xeqA')
    assert not calculator.programming.is_running


def test_run_stop_and_resume(calculator, press):
    press(':lblA1rs2:')
    press('xeqA')
    assert calculator.stack.x == 1.0
    press('rs')
    assert calculator.stack.x == 2.0


def test_step_limit():
    calculator = Calculator(max_steps=50)
    for key in ':', 'lbl', 'A', 'gto', 'A', ':':
        calculator.process_input(key)
    message = calculator.execute('xeq', ['A'])
    assert message.startswith('Interrupted')
    assert not calculator.programming.is_running


def test_label_goto(calculator, press):
    press(':12lblA+gtoA:')
    assert calculator.programming.labels == {'A': 3}
    press('gtoA')
    assert calculator.programming.program_counter == 2
    assert calculator.program_line() == ' 03 LBL A'
    with raises(LabelNotFound):
        press('gtoB')


def test_label_goto_after_deletion(calculator, press):
    press(':12lblA+:')
    press(':')
    calculator.programming.edit_position = 1
    press('del')
    press(':')
    assert calculator.programming.labels == {'A': 2}
    press('gtoA')
    assert calculator.program_line() == ' 02 LBL A'


def test_gto_in_programming_mode_is_recorded(calculator, press):
    press(':lblAgtoA')
    assert str(calculator.programming.program[-1]) == 'GTO A'


def test_single_step(calculator, press):
    press(':lblA2+:3rtn')
    assert press('sst') == 'SST: 01 LBL A'
    assert press('sst') == 'SST: 02 2'
    assert press('sst') == 'SST: 03 +'
    assert calculator.stack.x == 5.0
    assert press('sst') == '.END.'
    assert calculator.programming.program_counter == 0
    assert press('bst') == 'Beginning of program'


def test_editor(calculator, press):
    press(':sincos')
    assert press('bst') == '02 COS'
    assert press('del') == 'Deleted: COS | At end'
    assert press('sst') == '02 .END.'
    assert press('prgm') == 'Program cleared'
    assert calculator.programming.program == []


def test_editor_errors(calculator, press):
    with raises(NotAllowed):
        press('del')
    with raises(NoProgram):
        press('rs')
    with raises(NoProgram):
        press('sst')
    with raises(LabelNotFound):
        press('xeqZ')


def test_recording_checks(calculator, press):
    press(':')
    with raises(MissingArgument):
        press('sto<enter>')
    calculator.programming.max_steps = 1
    press('1')
    with raises(MemoryFull):
        press('2')


def test_display(calculator, press):
    assert calculator.get_display().splitlines()[:6] == [
        'T: 0.0000',
        'Z: 0.0000',
        'Y: 0.0000',
        'X: 0.0000',
        'CMD: [] FIX 4',
        '',
    ]
    press('12')
    assert calculator.get_display().splitlines()[3] == 'X: 12_'


def test_flags(calculator, press):
    press('F12')
    assert calculator.status_line() == 'CMD: [] EN:1 EEX:0 SL:0 FIX 4'
    assert ': lbl gto xeq sto rcl  F' in calculator.get_display()
    press('F')
    assert calculator.status_line() == 'CMD: [] FIX 4'


def test_program_line(calculator, press):
    press(':lblA:')
    assert calculator.program_line() == ' 01 LBL A'
    calculator.programming.program_counter = 1
    assert calculator.program_line() == ' 02 END'
    press('sto')
    assert calculator.status_line().startswith('CMD: [sto __]')


def test_single_step_through_subroutine(calculator, press):
    press(':lblAxeqB1+rtnlblB2rtn:')
    press('5gtoA')
    assert press('sst') == 'SST: 01 LBL A'
    assert press('sst') == 'SST: 02 XEQ B'
    assert calculator.programming.subroutine_stack == [2]
    assert press('sst') == 'SST: 06 LBL B'
    assert press('sst') == 'SST: 07 2'
    assert press('sst') == 'SST: 08 RTN'
    assert calculator.programming.subroutine_stack == []
    assert press('sst') == 'SST: 03 1'
    assert press('sst') == 'SST: 04 +'
    assert calculator.registers()[:2] == (3.0, 5.0)
    assert not calculator.programming.is_running


def test_run_resumes_stepped_subroutine(calculator, press):
    press(':lblAxeqB1+rtnlblB2rtn:')
    press('5gtoA')
    for _ in range(3):
        press('sst')
    press('rs')
    assert calculator.registers()[:2] == (3.0, 5.0)
    assert calculator.programming.program_counter == 5
    assert calculator.programming.subroutine_stack == []

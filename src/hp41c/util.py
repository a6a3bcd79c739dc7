from functools import wraps


class HP41CError(Exception):
    '''
    Any user-facing calculator failure.

    Leaves the calculator in a valid state; the next keystroke is processed
    normally.
    '''
    category = 'Error'


# Stack and arithmetic
class StackError(HP41CError):           category = 'Stack error'
class DivisionByZero(StackError):       pass
class MathError(StackError):            pass
class StackUnderflow(StackError):       pass

# Number entry
class InputError(HP41CError):           category = 'Input error'
class InvalidNumber(InputError):        pass
class NumberOverflow(InputError):       pass
class InvalidDigit(InputError):         pass

# Command parsing and execution
class CommandError(HP41CError):         category = 'Command error'
class UnknownCommand(CommandError):     pass
class MissingArgument(CommandError):    pass
class InvalidArgument(CommandError):    pass
class NotAllowed(CommandError):         pass

# Program memory
class ProgrammingError(HP41CError):     category = 'Programming error'
class LabelNotFound(ProgrammingError):  pass
class MemoryFull(ProgrammingError):     pass
class NoProgram(ProgrammingError):      pass
class InvalidLine(ProgrammingError):    pass
class SubroutineStackOverflow(ProgrammingError): pass

# Storage registers
class StorageError(HP41CError):         category = 'Storage error'
class InvalidRegister(StorageError):    pass
class RegisterArithmeticError(StorageError): pass


def describe(error):
    '''
    Render an error as "<category>: <message>".
    '''
    return '{}: {}'.format(error.category, error.args[0] if error.args else
                           type(error).__name__)


def wrap_user_errors(error, fmt):
    '''
    Decorator converting Python arithmetic exceptions into calculator errors.

    Passes through HP41CErrors. fmt is formatted with the wrapped call's
    arguments.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except HP41CError:
                raise
            except (ArithmeticError, ValueError) as e:
                raise error(fmt.format(*args, **kwargs), e)
        return wrapper
    return decorator

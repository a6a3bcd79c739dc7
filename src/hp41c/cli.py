import logging
import sys
from os import path
from argparse import ArgumentParser, REMAINDER, OPTIONAL

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .util import HP41CError, describe
from .calculator import Calculator, ENTER
from .display import DisplayMode
from .lexer import Lexer
from .observer import LoggingObserver, PRESETS


class InteractiveInput:
    def __init__(self, prompt, calculator, history=None):
        self.prompt = prompt
        self.calculator = calculator
        self.history = history

    def _toolbar(self):
        return self.calculator.status_line()

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    history=self.history and
                                    FileHistory(path.expanduser(self.history)),
                                    # Parser state, flags, mode, program line
                                    bottom_toolbar=self._toolbar,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the HP-41C emulator.

    Input is keystroke scripts, one line at a time: "5<enter>3+" or
    "5 enter 3 +". After each line the display is printed.
    '''

    DEFAULT_PROMPT = '41C> '
    HISTORY_FILE = '~/.hp41c_history'
    LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s: %(message)s'

    def observer(self):
        '''
        Build the logging observer the arguments ask for, or None.
        '''
        if not (self.args.verbose or self.args.log or self.args.log_file):
            return None
        if self.args.log_file:
            handler = logging.FileHandler(self.args.log_file)
        else:
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(self.LOG_FORMAT))
        observer = LoggingObserver()
        logging.getLogger(observer.name).addHandler(handler)
        observer.configure('all' if self.args.verbose
                           else self.args.log or 'all')
        return observer

    def calculator(self):
        if self._calculator is None:
            self._calculator = Calculator(display_mode=self.args.mode,
                                          digits=self.args.digits,
                                          observer=self.observer())
        return self._calculator

    def dumper(self):
        '''
        Dump all lexeme matches and the keystrokes they produce.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>\t<repr(keystroke)>')
        for line in self.args.expressions:
            for match in lexer.lex(line.rstrip('\n')):
                print(*lexer.matchedgroups(match).keys(),
                      repr(match.group(0)),
                      repr(lexer.keystroke(match)),
                      sep='\t')

    def executor(self):
        '''
        Run the calculator.
        '''
        calculator = self.calculator()
        lexer = Lexer()
        for line in self.args.expressions:
            try:
                keys = list(lexer.keystrokes(line.rstrip('\n'))) or [ENTER]
            # Nothing of an unlexable line runs
            except HP41CError as e:
                self.error(e)
                continue
            for key in keys:
                try:
                    message = calculator.process_input(key)
                except HP41CError as e:
                    self.error(e)
                    continue
                if message:
                    print(message)
            if not self._interactive() or not self.args.quiet:
                print(calculator.get_display())

    def error(self, error):
        print('ERROR:', describe(error), file=sys.stderr)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           sys.stdin.isatty() and sys.stdout.isatty():
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    calculator=self.calculator(),
                                    history=self.HISTORY_FILE)
        else:
            return sys.stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self._calculator = None
        self.argument_parser = ArgumentParser(description='HP-41C emulator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='log everything to stderr')
        self.argument_parser.add_argument('-q', '--quiet',
                                          action='store_true',
                                          help="don't print the display "
                                               'after each interactive line')
        self.argument_parser.add_argument('--log', choices=sorted(PRESETS),
                                          help='logging preset')
        self.argument_parser.add_argument('--log-file', metavar='PATH')
        self.argument_parser.add_argument('--mode',
                                          choices=[mode.value.lower()
                                                   for mode in DisplayMode])
        self.argument_parser.add_argument('--digits', type=int)
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=sys.stdin)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        if self.args.expressions is sys.stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except HP41CError as e:
            # Only the dumper lets these through
            self.error(e)
            sys.exit(1)
        except KeyboardInterrupt:
            sys.exit(1)

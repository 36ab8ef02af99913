"""
Bosun command layer: the lifecycle of one command invocation.

What this module provides
- Command: abstract base for CLI commands. A subclass declares its option schema
  and implements action(); everything else is the fixed lifecycle:

    construction  register pre_action/post_action handlers on the signal bus,
                  then init + load the option source and keep the positional params
    exec()        send "pre_action" → action() → send "post_action"
                  → write <<reset>> on stdout and stderr

- invoke(cls, argv): process entry point that assembles the collaborators
  (Context, Stdio, Getopt, Signal), builds the command and runs it.

Hooks
- pre_action() and post_action() are no-ops meant to be overridden; any other code
  holding the signal bus can attach more callbacks to the same event names
  (logging, authorization, timing) without touching the command class.

Failure policy
- SchemaError / ParseError are raised while the command is constructed, before
  exec() can run.
- Errors raised by action() or by a hook propagate out of exec() unmodified and the
  "post_action" event is skipped. The terminal reset always runs, so a failing
  action cannot leave the terminal colored; a reset that fails after such an
  error is logged and never hides it.

Quick start
    from bosun import Command, Flag, invoke

    class Greet(Command):
        options = {"loud": Flag("-l", "--loud")}

        def action(self):
            name = self.params[0] if self.params else "world"
            style = "<<bold red>>" if self.getopt.get("loud") else ""
            self.stdio.outln(f"{style}hello {name}")

    if __name__ == "__main__":
        invoke(Greet, shell=True)
"""
import logging
import re
import shlex
from abc import ABC, abstractmethod
from types import MappingProxyType

from .context import Context
from .faults import CommandException, trigger
from .getopt import Getopt
from .signals import Signal
from .stdio import Stdio
from .utils import *

logger = logging.getLogger(__name__)

RESET = "<<reset>>"


class Command(ABC):
    """
    The CLI equivalent of a page controller: one instance per invocation.

    Class attributes
    - name (str): program label used in fault rendering; defaults to the class name
      in kebab-case (e.g. ``ListFiles`` → ``list-files``).
    - options (Mapping[str, Option | Flag]): the option schema handed to Getopt.
    - strict (bool): whether unknown switches are parse errors.

    Instance attributes
    - context, stdio, getopt, signal: the injected collaborators.
    - params: positional parameters parsed at construction (a fresh list per access).
    """

    name = "command"
    options = MappingProxyType({})
    strict = True

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if "name" not in cls.__dict__:
            cls.name = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()

    def __init__(self, context, stdio, getopt, signal):
        """
        Parameters
        - context (Context): raw argument vector (program name excluded).
        - stdio (Stdio): output sink with "out" and "err" channels.
        - getopt (Getopt): option/parameter source.
        - signal (Signal): hook bus the lifecycle events are sent through.

        Raises
        - SchemaError: the class option schema is malformed.
        - ParseError: the argument vector does not fit the schema.
        """
        self.context = context
        self.stdio = stdio
        self.getopt = getopt
        self.signal = signal

        # handle these signals
        self.signal.handler(self, "pre_action", self.pre_action)
        self.signal.handler(self, "post_action", self.post_action)

        self._load_getopt_params()

    def _load_getopt_params(self):
        """
        Pass the context arguments to getopt and retain the positional params.
        """
        self.getopt.init(self.options, self.strict)
        self.getopt.load(self.context.get_argv())
        self._params = tuple(self.getopt.get_params())

    @property
    def params(self):
        return list(self._params)

    def exec(self):
        """
        Run the command. In order:

        - signals "pre_action"
        - calls action()
        - signals "post_action"
        - resets the terminal styling on stdout, then on stderr (always, even when
          a previous step raised)

        When a previous step raised, its error propagates unmodified; a failing
        reset (closed stream, broken pipe) is then only logged. Otherwise errors
        from the reset propagate.

        Calling exec() twice runs the whole sequence twice.
        """
        logger.debug("executing %s with %d params", self.name, len(self._params))
        try:
            self.signal.send(self, "pre_action")
            self.action()
            self.signal.send(self, "post_action")
        except BaseException:
            try:
                self._reset()
            except Exception:
                logger.debug("could not reset the terminal after %s failed", self.name, exc_info=True)
            raise
        self._reset()

    def _reset(self):
        # return terminal output to normal colors
        self.stdio.out(RESET)
        self.stdio.err(RESET)

    def pre_action(self):
        """
        Runs before action() as part of the "pre_action" signal.
        """

    @abstractmethod
    def action(self):
        """
        The main logic of the command.
        """

    def post_action(self):
        """
        Runs after action() as part of the "post_action" signal.
        """

    def __repr__(self):
        return f"{self.name}(params={list(self._params)!r})"


def invoke(cls, argv=Unset, /, *, stdio=Unset, signal=Unset, shell=False, colorful=True, fancy=False):
    """
    Build a command from its collaborators and execute it.

    Parameters
    - cls: a concrete Command subclass.
    - argv:
      • Unset: read tokens from sys.argv[1:] (via Context.current()).
      • str: shell-like string; split with shlex.split.
      • Iterable[str]: pre-tokenized arguments.
    - stdio: Stdio to write to (defaults to the process streams).
    - signal: Signal bus to use (defaults to a fresh one); pass a shared bus to
      attach hooks before construction.
    - shell: when True, faults raised while building the command are rendered on
      stderr with rich and the process exits with status 1; otherwise they raise.
    - colorful, fancy: rendering flags for shell mode.

    Returns
    - the executed Command instance.
    """
    if not isinstance(cls, type) or not issubclass(cls, Command):
        raise TypeError("invoke() first argument must be a Command subclass")

    if argv is Unset:
        context = Context.current()
    else:
        context = Context(shlex.split(argv) if isinstance(argv, str) else argv)

    stdio = Stdio.current() if stdio is Unset else stdio
    signal = Signal() if signal is Unset else signal

    try:
        command = cls(context, stdio, Getopt(), signal)
    except CommandException as fault:
        if shell:
            trigger(fault, shell=True, colorful=colorful, fancy=fancy, prog=cls.name)
        raise

    command.exec()
    return command


__all__ = (
    "Command",
    "invoke",
)

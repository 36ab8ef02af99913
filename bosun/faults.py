"""
Bosun faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error.
  Codes are grouped by domain (schema 10xxx, parsing 11xxx) so logs and searches
  stay predictable.
- CommandException: base type that carries a message plus options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- SchemaError: a malformed option schema (raised while a command is constructed).
- ParseError: a command line that does not fit the schema (raised while a command
  is constructed, before any action runs).
- trigger(): central entry point to surface a fault (raise, or render in shell mode).

UX goals
- Position-first messages: parse messages include the ordinal position of the
  offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- Errors raised by the action of a command are not faults; they propagate untouched.
- The host application may tune rendering through __main__ attributes:
  __prog__ (program name), __styles__ (rich styles) and __codes__ (code labels).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the package (stable identifiers).

    grouping (by high-level domain)
    - schema (101xx/1011x)
      • INVALID_SCHEMA, INVALID_NAME, DUPLICATED_NAME, INVALID_PARAM
    - parsing (1111x)
      • MALFORMED_TOKEN, UNKNOWN_SWITCH, FLAG_ASSIGNMENT, DUPLICATED_SWITCH,
        MISSING_VALUE
    """
    # --- schema errors (10xxx) ---
    INVALID_SCHEMA              = 10101
    INVALID_NAME                = 10111
    DUPLICATED_NAME             = 10112
    INVALID_PARAM               = 10113

    # --- parsing errors (11xxx) ---
    MALFORMED_TOKEN             = 11111
    UNKNOWN_SWITCH              = 11112
    FLAG_ASSIGNMENT             = 11113
    DUPLICATED_SWITCH           = 11115
    MISSING_VALUE               = 11117

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class of every fault surfaced by bosun.

    options
    - code (FaultCode), title (str), hint (str): rendering payload.
    - shell, colorful, fancy, prog: runtime rendering flags merged by trigger().
    - anything else (input, index, suggestions, ...) is kept for callers to inspect.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        # Expose options as read-only attributes (fault.code, fault.input, ...)
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        prog = text(getattr(main, "__prog__", self.options.get("prog", "bosun")), "prog-name")

        header = [Text("[ "), prog]
        if (code := self.options.get("code")) is not None:
            header += [Text(" — "), text(code.normalize(), "code")]
        if title := self.options.get("title"):
            header += [Text(" | "), text(title.title(), "error-title")]
        header = Text.assemble(*header, " ]")

        message = text(self.message or "", "error-message")
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SchemaError(CommandException, ValueError): ...


class ParseError(CommandException): ...
class MalformedTokenError(ParseError): ...
class UnknownSwitchError(ParseError): ...
class FlagAssignmentError(ParseError): ...
class DuplicatedSwitchError(ParseError): ...
class MissingValueError(ParseError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich stderr console and the process
      exits with status 1; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "SchemaError",
    "ParseError",
    "MalformedTokenError",
    "UnknownSwitchError",
    "FlagAssignmentError",
    "DuplicatedSwitchError",
    "MissingValueError",
    "trigger",
)

"""
Bosun standard streams.

- StdioResource wraps one text stream and a POSIX-capability flag. Every write
  passes through the markup formatter: escape codes when the flag is set, plain
  text otherwise.
- Stdio groups the three channels and offers the out/err/in helpers used by
  commands.

Capability detection
- When no flag is given, a stream is POSIX-capable if the platform is POSIX and
  rich reports a terminal for it (rich also honours FORCE_COLOR / TTY_COMPATIBLE).
"""
import os
import sys

from rich.console import Console

from . import formatter
from .utils import *


def _detect(stream):
    return os.name == "posix" and Console(file=stream).is_terminal


class StdioResource:
    """
    One channel of the standard streams.

    Parameters
    - stream: a text file-like object (write/read/readline as needed).
    - posix (bool | Unset): escape-code capability; detected when Unset.
    """

    def __init__(self, stream, posix=Unset, /):
        self._stream = stream
        self._posix = bool(_detect(stream) if posix is Unset else posix)

    @property
    def stream(self):
        return self._stream

    @property
    def posix(self):
        return self._posix

    def write(self, text, /):
        self._stream.write(formatter.format(text, self._posix))
        if flush := getattr(self._stream, "flush", None):
            flush()

    def writeln(self, text="", /):
        self.write(text + "\n")

    def read(self):
        return self._stream.read()

    def readline(self):
        return self._stream.readline()

    def __repr__(self):
        return f"stdio-resource(stream={self._stream!r}, posix={self._posix!r})"


class Stdio:
    """
    Standard input, output and error channels.
    """

    def __init__(self, stdin, stdout, stderr, /):
        for channel in (stdin, stdout, stderr):
            if not isinstance(channel, StdioResource):
                raise TypeError("Stdio() arguments must be StdioResource instances")
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr

    @classmethod
    def current(cls):
        """
        Wrap the process streams (sys.stdin, sys.stdout, sys.stderr).
        """
        return cls(StdioResource(sys.stdin), StdioResource(sys.stdout), StdioResource(sys.stderr))

    @property
    def stdin(self):
        return self._stdin

    @property
    def stdout(self):
        return self._stdout

    @property
    def stderr(self):
        return self._stderr

    def in_(self):
        """
        Read one line from stdin without its line terminator.
        """
        return self._stdin.readline().rstrip("\r\n")

    def inln(self):
        """
        Read one line from stdin, line terminator included.
        """
        return self._stdin.readline()

    def out(self, text="", /):
        self._stdout.write(text)

    def outln(self, text="", /):
        self._stdout.writeln(text)

    def err(self, text="", /):
        self._stderr.write(text)

    def errln(self, text="", /):
        self._stderr.writeln(text)


__all__ = (
    "StdioResource",
    "Stdio",
)

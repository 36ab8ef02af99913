"""
Bosun command-line context: an immutable snapshot of the process inputs.

Business logic never reads sys.argv or os.environ directly; a Context is built
once at the process entry point (see Context.current and commands.invoke) and
passed to the command.
"""
import os
import sys
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .utils import *


class Context:
    """
    Snapshot of the raw argument vector (program name excluded) and environment.
    """

    def __init__(self, argv=(), env=Unset, /):
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("Context() first argument must be an iterable of strings")
        argv = tuple(argv)
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("Context() first argument must be an iterable of strings")
        if not isinstance(env := coalesce(env, {}), Mapping):
            raise TypeError("Context() second argument must be a mapping")

        self._argv = argv
        self._env = MappingProxyType(dict(env))

    @classmethod
    def current(cls):
        """
        Snapshot the running process: sys.argv[1:] and os.environ.
        """
        return cls(sys.argv[1:], os.environ)

    def get_argv(self):
        """
        Return the raw command-line tokens as a list (program name excluded).
        """
        return list(self._argv)

    def get_env(self, name=Unset, default=None, /):
        """
        Return one environment variable, or the whole read-only environment.
        """
        if name is Unset:
            return self._env
        return self._env.get(name, default)

    def __repr__(self):
        return f"context(argv={self._argv!r})"


__all__ = (
    "Context",
)

"""
Bosun option/parameter source.

Getopt reads a raw argument vector against an option schema and splits it into
named switch values and positional parameters.

Lifecycle
- init(options, strict): install the schema (mapping of names to Option/Flag specs).
- load(argv): parse the tokens; previous results are discarded.
- get_params(): positional parameters in the order encountered.
- get(name): the value of one switch (or a read-only mapping of all of them).

Token grammar
- '--' ends switch processing; every later token is positional.
- '--name=value' and '--name value' (the latter only for param="required").
- '-x', '-x value', '-x=value'; '-abc' clusters flags (a value-bearing short
  option may only close a cluster, its value comes from the next token).
- '-' alone and tokens like '-1' are positional, or the value of a preceding
  option that takes one.

Strictness
- strict=True: an unknown switch raises UnknownSwitchError (a ParseError).
- strict=False: unknown switches are kept under their spelled alias (e.g. '--foo')
  with their inline value, or True.
"""
import difflib
import logging
import re
from collections import deque
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .arguments import Option, Flag, REQUIRED
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)

_LONG = re.compile(r"(?P<input>--[^=]*)(=(?P<value>.*))?", re.DOTALL)
_SHORT = re.compile(r"(?P<input>-[^\W\d_])=(?P<value>.*)", re.DOTALL)


class Getopt:
    """
    Option/parameter source consumed by Command.

    The parser is reusable: init() and load() may be called again, each call
    resetting the parsed state.
    """

    def __init__(self):
        self._options = MappingProxyType({})
        self._strict = True
        self._switches = {}
        self._values = {}
        self._params = []
        self._tokens = deque()
        self._index = 0

    @property
    def options(self):
        return self._options

    @property
    def strict(self):
        return self._strict

    def init(self, options, strict=True, /):
        """
        Install an option schema.

        Parameters
        - options: Mapping[str, Option | Flag]
          Schema names (the keys used by get()) mapped to their specs.
        - strict: bool
          Whether unknown switches are errors.

        Raises
        - SchemaError: when the schema is not a mapping of non-empty strings to specs,
          or when two specs share an alias.
        """
        if not isinstance(options, Mapping):
            raise SchemaError(
                "option schema must be a mapping of names to specs",
                title="invalid schema",
                code=FaultCode.INVALID_SCHEMA,
                hint="declare options as a dict, for example: {'verbose': Flag('-v')}",
            )

        switches = {}
        for name, spec in options.items():
            if not isinstance(name, str) or not name.strip():
                raise SchemaError(
                    "option schema keys must be non-empty strings, not %r" % (name,),
                    title="invalid schema",
                    code=FaultCode.INVALID_SCHEMA,
                    hint="use a plain identifier as key, for example: 'verbose'",
                )
            if not isinstance(spec, Option | Flag):
                raise SchemaError(
                    "option %r must be declared with Option or Flag, not %s" % (name, type(spec).__name__),
                    title="invalid schema",
                    code=FaultCode.INVALID_SCHEMA,
                    hint="wrap the aliases in Option(...) or Flag(...)",
                    input=name,
                )
            for alias in spec.names:
                if alias in switches:
                    raise SchemaError(
                        "alias %r is shared by options %r and %r" % (alias, switches[alias][0], name),
                        title="duplicated name",
                        code=FaultCode.DUPLICATED_NAME,
                        hint="give every option its own aliases",
                        input=alias,
                    )
                switches[alias] = (name, spec)

        self._options = MappingProxyType(dict(options))
        self._strict = bool(strict)
        self._switches = switches
        self._values.clear()
        self._params.clear()

    def load(self, argv, /):
        """
        Parse an argument vector (program name excluded).

        Raises
        - TypeError: when argv is not an iterable of strings.
        - ParseError: when a token cannot be read against the schema.
        """
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("load() argument must be an iterable of strings")
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("load() argument must be an iterable of strings")

        self._values.clear()
        self._params.clear()
        self._tokens = deque(tokens)
        self._index = 0

        while self._tokens:
            token = self._next()
            if token == "--":
                self._params.extend(self._tokens)
                self._index += len(self._tokens)
                self._tokens.clear()
            elif token.startswith("--"):
                self._load_long(token)
            elif _is_switch(token):
                self._load_short(token)
            else:
                self._params.append(token)

        logger.debug("loaded %d params and %d switches", len(self._params), len(self._values))

    def get_params(self):
        """
        Return the positional parameters (a fresh list) in the order encountered.
        """
        return list(self._params)

    def get(self, name=Unset, default=None, /):
        """
        Return the value of a switch.

        - get(): read-only mapping of every declared option (defaults included)
          plus any unknown switch recorded in non-strict mode.
        - get(name): the parsed value, the schema default when absent, or `default`
          for names that are neither declared nor seen.

        Values
        - Option: str (or True for a bare optional-param option); tuple when multi.
        - Flag: True / False; occurrence count when multi.
        """
        if name is Unset:
            return MappingProxyType({
                name: self.get(name) for name in (*self._options, *self._values)
            })
        try:
            return _freeze(self._values[name])
        except KeyError:
            pass
        try:
            return self._options[name].default
        except KeyError:
            return default

    def _next(self):
        self._index += 1
        return self._tokens.popleft()

    def _load_long(self, token):
        match = _LONG.fullmatch(token)
        input = match["input"]
        value = Unset if match["value"] is None else match["value"]
        if not re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", input):
            raise MalformedTokenError(
                "bad form of option %r at %s position" % (token, ordinal(self._index)),
                title="malformed option",
                code=FaultCode.MALFORMED_TOKEN,
                hint="use the --name or --name=value forms",
                input=token,
                index=self._index,
            )
        self._store(input, value)

    def _load_short(self, token):
        if match := _SHORT.fullmatch(token):
            return self._store(match["input"], match["value"])

        cluster = token[1:]
        if not all(char.isalpha() for char in cluster):
            raise MalformedTokenError(
                "bad form of option or flag %r at %s position" % (token, ordinal(self._index)),
                title="malformed option or flag",
                code=FaultCode.MALFORMED_TOKEN,
                hint="short switches are a dash and letters (for example: -v or -abc)",
                input=token,
                index=self._index,
            )

        for offset, char in enumerate(cluster, 1):
            input = "-" + char
            entry = self._switches.get(input)
            if entry and isinstance(entry[1], Option) and entry[1].param == REQUIRED and offset < len(cluster):
                raise MissingValueError(
                    "option %r at %s position cannot take a value inside %r" % (input, ordinal(self._index), token),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="move %s to the end of the cluster or pass it on its own: %s <value>" % (input, input),
                    input=input,
                    index=self._index,
                )
            self._store(input, Unset)

    def _store(self, input, value):
        """
        Record one switch occurrence, consuming a following value token if needed.
        """
        index = self._index
        try:
            name, spec = self._switches[input]
        except KeyError:
            if self._strict:
                suggestions = difflib.get_close_matches(input, self._switches.keys(), 5)
                try:
                    hint = "did you mean %r?" % suggestions[0]
                except IndexError:
                    hint = "remove it or run the command with --help to see the available options"
                raise UnknownSwitchError(
                    "unknown option or flag %r at %s position" % (input, ordinal(index)),
                    title="unknown option or flag",
                    code=FaultCode.UNKNOWN_SWITCH,
                    hint=hint,
                    input=input,
                    index=index,
                    suggestions=suggestions,
                ) from None
            logger.debug("keeping unknown switch %r at position %d", input, index)
            self._values[input] = coalesce(value, True)
            return

        if isinstance(spec, Flag):
            if value is not Unset:
                raise FlagAssignmentError(
                    "flag %r at %s position cannot have a value" % (input, ordinal(index)),
                    title="flag cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    hint="remove everything from '=' (for example: %s)" % input,
                    input=input,
                    index=index,
                )
            value = True
        elif value is Unset:
            if spec.param != REQUIRED:
                value = True
            elif self._tokens and not _is_switch(self._tokens[0]):
                value = self._next()
            else:
                raise MissingValueError(
                    "option %r at %s position requires a value" % (input, ordinal(index)),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="pass it inline or after a space (for example: %s=<value> or %s <value>)" % (input, input),
                    input=input,
                    index=index,
                )

        if name not in self._values:
            self._values[name] = (1 if isinstance(spec, Flag) else [value]) if spec.multi else value
        elif not spec.multi:
            kind = "option" if isinstance(spec, Option) else "flag"
            raise DuplicatedSwitchError(
                "%s %r at %s position was already provided" % (kind, input, ordinal(index)),
                title="duplicated %s" % kind,
                code=FaultCode.DUPLICATED_SWITCH,
                hint="keep a single %s; each %s can be specified only once" % (kind, kind),
                input=input,
                index=index,
            )
        elif isinstance(spec, Flag):
            self._values[name] += 1
        else:
            self._values[name].append(value)


def _is_switch(token):
    # '-' alone and negative numbers ('-1', '-2.5') are values, not switches
    return token.startswith("-") and token != "-" and not token[1].isdigit()


def _freeze(object):
    return tuple(object) if isinstance(object, list) else object


__all__ = (
    "Getopt",
)

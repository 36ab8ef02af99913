r"""
Bosun option specifications.

Overview
- Specs
  • Option: named, value-bearing switch with one or more aliases (e.g., -o/--output).
  • Flag: named, presence-only switch (no payload), e.g., -v/--verbose.
  A command declares its schema as a mapping of names to specs:

    options = {
        "output": Option("-o", "--output"),
        "level": Option("--level", param="optional", default="info"),
        "verbose": Flag("-v", "--verbose", multi=True),
    }

Metadata (sanitized on construction)
- names: one or more of "-x" (single letter) or "--long-name"; duplicates rejected.
- multi (bool): the switch may be repeated; values are collected in order.
- descr: Unset | str (short help), non-empty when provided.
- Option only
  • param: "required" (a value must follow) or "optional" (value only inline, --name=value).
  • default: any value returned when the option is absent.

Validation highlights
- Names must match r"-[^\W\d_]|--[^\W\d_](-?[^\W_]+)*" and be unique within a spec.
- Every violation raises SchemaError (a ValueError) with a stable FaultCode.
"""
import functools
import operator
import re

from .faults import FaultCode, SchemaError
from .utils import *

REQUIRED = "required"
OPTIONAL = "optional"

_NAME = re.compile(r"-[^\W\d_]|--[^\W\d_](-?[^\W_]+)*")


def _typename(cls):
    return re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize shared switch metadata (names, multi, descr).

    Raises
    - SchemaError: when names are missing, malformed or duplicated, or when descr
      is not a non-empty string.

    Notes
    - This function mutates the provided metadata dict in place.
    """
    typename = _typename(cls)
    if not metadata["names"]:
        raise SchemaError(
            f"{typename} must specify at least one name",
            title="missing names",
            code=FaultCode.INVALID_NAME,
            hint="declare at least one alias, for example: %s('--name')" % cls.__name__,
        )

    names = []
    for name in metadata["names"]:
        if not isinstance(name, str) or not _NAME.fullmatch(name := name.strip()):
            raise SchemaError(
                f"{typename} name {name!r} is not a valid switch name",
                title="invalid name",
                code=FaultCode.INVALID_NAME,
                hint="use a single letter after '-' or a word after '--' (for example: -v, --verbose)",
                input=name,
            )
        if name in names:
            raise SchemaError(
                f"{typename} name {name!r} is declared twice",
                title="duplicated name",
                code=FaultCode.DUPLICATED_NAME,
                hint="keep a single occurrence of each alias",
                input=name,
            )
        names.append(name)
    metadata["names"] = tuple(names)

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise SchemaError(f"{typename} 'descr' must be a string", title="invalid description", code=FaultCode.INVALID_SCHEMA)
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise SchemaError(f"{typename} 'descr' cannot be empty", title="invalid description", code=FaultCode.INVALID_SCHEMA)
    metadata["descr"] = coalesce(descr)

    metadata["multi"] = bool(metadata["multi"])


class _Switch:
    __introspectable__ = ("names", "multi", "descr")

    names = mirror("names")
    multi = mirror("multi")
    descr = mirror("descr")

    def __init__(self, metadata, /):
        # Mirror sanitized metadata into private fields; read-only properties expose them.
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __repr__(self):
        return f"{_typename(type(self))}({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


class Option(_Switch):
    """
    Named, value-bearing switch specification.

    Parameters
    - names: one or more str ("-o", "--output").
    - param: "required" | "optional"
      • required: the value is taken inline (--output=path) or from the next token.
      • optional: the value may only be given inline; a bare --output yields True.
    - default: value reported when the option is absent (not validated).
    - multi: allow repetition; values are collected into a tuple.
    - descr: short description for help output.
    """
    __introspectable__ = ("names", "param", "default", "multi", "descr")

    param = mirror("param")
    default = mirror("default")

    def __init__(self, *names, param=REQUIRED, default=None, multi=False, descr=Unset):
        metadata = {
            "names": names,
            "param": param,
            "default": default,
            "multi": multi,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)
        if param not in (REQUIRED, OPTIONAL):
            raise SchemaError(
                f"option 'param' must be {REQUIRED!r} or {OPTIONAL!r}, not {param!r}",
                title="invalid param",
                code=FaultCode.INVALID_PARAM,
                hint="use param=%r when a value must follow the option" % REQUIRED,
            )
        super().__init__(metadata)


class Flag(_Switch):
    """
    Named, presence-only switch specification.

    A flag carries no value: it reads as True when present (or as the number of
    occurrences when multi is set) and False when absent.
    """

    default = False

    def __init__(self, *names, multi=False, descr=Unset):
        metadata = {
            "names": names,
            "multi": multi,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)
        super().__init__(metadata)


__all__ = (
    "Option",
    "Flag",
    "REQUIRED",
    "OPTIONAL",
)

r"""
Clidax option configurations and parse results.

Overview
- OptionConfig: declaration of one logical option (name, aliases, arity,
  defaults, on_parsed callback). Instances are read-only.
- ParsedArgs: result of a parse; command parameters plus a mapping from
  canonical option names to their option parameters.
- ANY_OPTION: the reserved wildcard name "*". A config with this name lets
  options that are not otherwise configured through without arity checks.

- Introspection & representation
  • ArgumentType metaclass exposes the fields listed in __introspectable__ as
    read-only properties (via mirror()) and provides stable __repr__ and
    __rich_repr__ implementations.

Quick example:
    >>> from clidax.arguments import OptionConfig, ANY_OPTION
    >>> configs = [
    ...     OptionConfig("foo-bar"),
    ...     OptionConfig("baz", "z", has_param=True, is_array=True),
    ...     OptionConfig("corge", has_param=True, defaults=["99"]),
    ...     OptionConfig(ANY_OPTION),
    ... ]

Public API
- Classes: OptionConfig, ParsedArgs
- Constants: ANY_OPTION
"""
import builtins
import functools
import operator
import re
from collections.abc import Iterable
from types import MappingProxyType

from .utils import *

ANY_OPTION = "*"


class ArgumentType(type):
    """
    Metaclass that turns argument classes into read-only, introspectable records.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__ (backed by "_{name}" attributes).
    - Provide stable, readable __repr__/__rich_repr__ implementations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and representations.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Example
            - option-config(name='baz', aliases=['z'], has_param=True, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


class OptionConfig(metaclass=ArgumentType):
    """
    Declaration of one option.

    Parameters
    - name: canonical option name (positional-only). Options given by the name
      or by any alias are collected under this name. ANY_OPTION ("*") makes a
      wildcard config.
    - aliases: additional names (variadic).
    - has_param: whether the option takes an option parameter ("--name=value").
    - is_array: whether the option may take parameters more than once.
    - defaults: parameters used when the option does not appear at all. An
      empty iterable is a real (empty) default; omitting it means no default.
    - on_parsed: callable receiving the option's final parameter list, or None
      when the option is absent, once the whole input has been parsed.

    Notes
    - Consistency between has_param, is_array and defaults is checked by
      parse_with() before scanning, so contradicting configs can be declared
      but never used.
    """
    __introspectable__ = ("name", "aliases", "has_param", "is_array", "defaults", "on_parsed")

    def __init__(
            self,
            name,
            /,
            *aliases,
            has_param=False,
            is_array=False,
            defaults=Unset,
            on_parsed=Unset,
    ):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not name:
            raise ValueError(f"{type(self).__typename__} 'name' cannot be empty")

        for alias in aliases:
            if not isinstance(alias, str):
                raise TypeError(f"{type(self).__typename__} 'aliases' must be strings")
            elif not alias:
                raise ValueError(f"{type(self).__typename__} 'aliases' cannot be empty")
        if len(set(aliases)) != len(aliases):
            raise ValueError(f"{type(self).__typename__} 'aliases' cannot contain duplicates")

        if not isinstance(has_param, bool):
            raise TypeError(f"{type(self).__typename__} 'has_param' must be a boolean")
        if not isinstance(is_array, bool):
            raise TypeError(f"{type(self).__typename__} 'is_array' must be a boolean")

        if defaults is not Unset:
            if isinstance(defaults, str) or not isinstance(defaults, Iterable):
                raise TypeError(f"{type(self).__typename__} 'defaults' must be an iterable of strings")
            defaults = tuple(defaults)
            if not all(isinstance(default, str) for default in defaults):
                raise TypeError(f"{type(self).__typename__} 'defaults' must be an iterable of strings")

        if not (on_parsed is Unset or builtins.callable(on_parsed)):
            raise TypeError(f"{type(self).__typename__} 'on_parsed' must be callable")

        self._name = name
        self._aliases = aliases
        self._has_param = has_param
        self._is_array = is_array
        self._defaults = defaults
        self._on_parsed = on_parsed


class ParsedArgs(metaclass=ArgumentType):
    """
    Result of parsing command line arguments.

    - cmd_params: command parameters (non-option arguments) in input order.
    - options: canonical option name -> option parameters. An option given
      without parameter maps to an empty list; an absent option has no key.

    ParsedArgs() is the empty result handed back with a failed parse.
    """
    __introspectable__ = ("cmd_params", "options")

    def __init__(self, cmd_params=(), options=MappingProxyType({}), /):
        self._cmd_params = tuple(cmd_params)
        self._options = MappingProxyType({name: tuple(params) for name, params in options.items()})

    def has_opt(self, name, /):
        """
        Return True if the option appeared in the input or has a default.
        """
        return name in self._options

    def opt_param(self, name, /):
        """
        Return the first option parameter of the option, or "" when the option
        is absent or was given without parameter.
        """
        try:
            return self._options[name][0]
        except (KeyError, IndexError):
            return ""

    def opt_params(self, name, /):
        """
        Return all option parameters of the option as a list, or None when the
        option is absent (an option given without parameter yields []).
        """
        try:
            return list(self._options[name])
        except KeyError:
            return None


__all__ = (
    # Classes
    "OptionConfig",
    "ParsedArgs",

    # Constants
    "ANY_OPTION",
)

"""
Clidax faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse fault.
  Codes are grouped by layer (configuration, tokens, binding, warnings).
- ParseException / ParseWarning: base types that carry a message plus a
  read-only options mapping (title, code, hint and diagnostic data such as
  option, field, input, bit_size) and know how to render themselves.
- trigger(): central entry point to surface any fault.

Behavior
- Outside shell mode exceptions are raised and warnings go through
  warnings.warn, so library users handle them like any other Python error.
- In shell mode faults are printed to stderr via rich; exceptions then exit
  with status 1.
- The host application can customize output from __main__:
  __prog__ (program name), __codes__ (code labels), __styles__ (rich styles).
"""
import copy
import inspect
import os.path
import sys
import warnings
from abc import ABC
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
    canonical fault codes (stable identifiers).

    grouping
    - configuration (1110x): malformed option configurations, caught before scanning.
    - tokens (1111x): malformed, unknown or mis-used options in the input.
    - binding (1112x/1113x): option store and value conversion problems.
    - warnings (121xx): non-fatal conditions.
    """
    # --- configuration errors ---
    CONFIG_IS_ARRAY_BUT_HAS_NO_PARAM    = 11101
    CONFIG_HAS_DEFAULT_BUT_HAS_NO_PARAM = 11102

    # --- token errors ---
    OPTION_HAS_INVALID_CHAR             = 11111
    UNCONFIGURED_OPTION                 = 11112
    OPTION_NEEDS_PARAM                  = 11113
    OPTION_TAKES_NO_PARAM               = 11114
    OPTION_IS_NOT_ARRAY                 = 11115

    # --- binding errors ---
    OPTION_STORE_IS_NOT_CHANGEABLE      = 11121
    ILLEGAL_OPTION_TYPE                 = 11122
    FAIL_TO_PARSE_INT                   = 11131
    FAIL_TO_PARSE_UINT                  = 11132
    FAIL_TO_PARSE_FLOAT                 = 11133

    # --- warnings ---
    DEFAULT_IGNORED                     = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(main):
    return getattr(main, "__prog__", os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "clidax")


def _render(fault, defaults, kind):
    """
    build the rich renderable shared by exceptions and warnings.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, defaults | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_prog(main), styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "", styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint"), styler("hint")))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")

    return Group(header, message, hint)


class ParseException(Exception):
    """
    base class of every fault raised while configuring, scanning or binding.

    options
    - title, code, hint: presentation data used by __rich__.
    - option / field / input / bit_size / type: diagnostic data of the fault.
    - result: the (empty) ParsedArgs handed back with a failed parse.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class ConfigIsArrayButHasNoParamError(ParseException): ...
class ConfigHasDefaultButHasNoParamError(ParseException): ...
class OptionHasInvalidCharError(ParseException): ...
class UnconfiguredOptionError(ParseException): ...
class OptionNeedsParamError(ParseException): ...
class OptionTakesNoParamError(ParseException): ...
class OptionIsNotArrayError(ParseException): ...
class OptionStoreIsNotChangeableError(ParseException): ...
class IllegalOptionTypeError(ParseException): ...
class FailToParseIntError(ParseException): ...
class FailToParseUintError(ParseException): ...
class FailToParseFloatError(ParseException): ...


class ParseWarning(ABC, Warning):
    """
    base class of non-fatal faults.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DefaultIgnoredWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - typical options: shell, fancy, colorful, result.
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
    "ParseException",
    "ConfigIsArrayButHasNoParamError",
    "ConfigHasDefaultButHasNoParamError",
    "OptionHasInvalidCharError",
    "UnconfiguredOptionError",
    "OptionNeedsParamError",
    "OptionTakesNoParamError",
    "OptionIsNotArrayError",
    "OptionStoreIsNotChangeableError",
    "IllegalOptionTypeError",
    "FailToParseIntError",
    "FailToParseUintError",
    "FailToParseFloatError",
    "ParseWarning",
    "DefaultIgnoredWarning",
    "FaultCode",
    "trigger",
)

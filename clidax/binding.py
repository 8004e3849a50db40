r"""
Clidax option stores: option configurations derived from dataclass fields.

Overview
- parse_for(args, store): derive one OptionConfig per field of a dataclass
  instance, parse the arguments with them, bind the option parameters into
  the fields and return the command parameters.
- derive_configs(store): the derivation step alone.
- option_field(spec, **kwargs): dataclasses.field() carrying the option spec.

Field types
- bool                             → flag (no parameter); True once given.
- int, float, str, sized aliases   → one parameter.
- list[T] of the above (not bool)  → one or more parameters.
Plain int is a 64-bit signed integer and plain float a 64-bit float; use
Int8..Int64, Uint..Uint64, Float32 and Float64 for other widths.

Numeric syntax
- integers: optional sign, 0x/0o/0b prefixes, a leading 0 for octal and "_"
  between digits.
- floats: decimal literals as float() reads them (so "_" between digits is
  accepted even without a prefix, and "inf"/"nan" are allowed), or
  hexadecimal literals with a binary exponent such as 0x1p-2.
- values beyond the bit width fail instead of saturating.

Option spec (the "opt" metadata entry)
- "name,alias1,alias2=default"
- an empty name means the field name with "_" turned into "-".
- the default of a list field is written [a,b,c], or X[aXbXc] to split on
  the character X instead of ","; [] is an empty list, and anything else is a
  single element (so "name=" means [""]).
- the default of a bool field is ignored (DefaultIgnoredWarning).

Quick example:
    >>> @dataclass
    ... class Options:
    ...     foo_bar: bool = option_field("foo-bar,f")
    ...     baz: int = option_field("baz,b=99")
    ...     qux: str = option_field("=XXX")
    ...     quux: list[str] = option_field("quux=[A,B,C]", default_factory=list)
    ...     corge: list[int] = field(default_factory=list)
    >>> options = Options(False, 0, "")
    >>> parse_for(["--foo-bar", "c1", "-b=12", "--corge=20", "--corge=21", "c2"], options)
    ['c1', 'c2']
    >>> options
    Options(foo_bar=True, baz=12, qux='XXX', quux=['A', 'B', 'C'], corge=[20, 21])
"""
import dataclasses
import math
import re
import struct
import typing
from typing import Annotated, NamedTuple

from .arguments import OptionConfig, ParsedArgs
from .faults import *
from .parser import _parse_with
from .utils import *

OPT = "opt"


class Width(NamedTuple):
    """
    numeric kind and bit size attached to int/float annotations.
    """
    kind: str
    bits: int


Int8 = Annotated[int, Width("int", 8)]
Int16 = Annotated[int, Width("int", 16)]
Int32 = Annotated[int, Width("int", 32)]
Int64 = Annotated[int, Width("int", 64)]
Uint = Annotated[int, Width("uint", 64)]
Uint8 = Annotated[int, Width("uint", 8)]
Uint16 = Annotated[int, Width("uint", 16)]
Uint32 = Annotated[int, Width("uint", 32)]
Uint64 = Annotated[int, Width("uint", 64)]
Float32 = Annotated[float, Width("float", 32)]
Float64 = Annotated[float, Width("float", 64)]

_OCTAL = re.compile(r"([+-]?)0_?([0-7](?:_?[0-7])*)")
_HEX_FLOAT = re.compile(r"([+-]?)0[xX]([0-9a-fA-F_]*\.?[0-9a-fA-F_]*[pP][+-]?[0-9_]+)")


def option_field(spec="", /, **kwargs):
    """
    return a dataclasses.field() whose metadata holds the option spec.

    other keyword arguments (default, default_factory, metadata, ...) are
    forwarded to dataclasses.field().
    """
    if not isinstance(spec, str):
        raise TypeError("option_field() argument must be a string")
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[OPT] = spec
    return dataclasses.field(metadata=metadata, **kwargs)


def _integer(text, /, *, signed):
    """
    parse an integer literal: optional sign, 0x/0o/0b prefixes, leading 0 for
    octal and "_" separators.
    """
    if not text.isascii() or text != text.strip():
        raise ValueError("invalid syntax %r" % text)
    if not signed and text.startswith(("+", "-")):
        raise ValueError("invalid syntax %r" % text)
    if match := _OCTAL.fullmatch(text):
        return int(match[1] + match[2], 8)
    return int(text, 0)


def _int_converter(field, bits):
    def convert(input, /):
        try:
            value = _integer(input, signed=True)
            if not -(1 << (bits - 1)) <= value < 1 << (bits - 1):
                raise OverflowError("value out of range")
        except (ValueError, OverflowError) as error:
            raise FailToParseIntError(
                "cannot parse %r as a %d-bit integer for field %r" % (input, bits, field),
                title="invalid integer",
                code=FaultCode.FAIL_TO_PARSE_INT,
                hint="give a whole number between %d and %d" % (-(1 << (bits - 1)), (1 << (bits - 1)) - 1),
                field=field,
                input=input,
                bit_size=bits,
            ) from error
        return value
    return rename(convert, "parse_int%d" % bits)


def _uint_converter(field, bits):
    def convert(input, /):
        try:
            value = _integer(input, signed=False)
            if not 0 <= value < 1 << bits:
                raise OverflowError("value out of range")
        except (ValueError, OverflowError) as error:
            raise FailToParseUintError(
                "cannot parse %r as a %d-bit unsigned integer for field %r" % (input, bits, field),
                title="invalid unsigned integer",
                code=FaultCode.FAIL_TO_PARSE_UINT,
                hint="give a whole number between 0 and %d" % ((1 << bits) - 1),
                field=field,
                input=input,
                bit_size=bits,
            ) from error
        return value
    return rename(convert, "parse_uint%d" % bits)


def _float(text, /):
    """
    parse a floating point literal: decimal as accepted by float(), or
    hexadecimal with a mandatory binary exponent (0x1.8p3).
    """
    if not text.isascii() or text != text.strip():
        raise ValueError("invalid syntax %r" % text)
    if match := _HEX_FLOAT.fullmatch(text):
        return float.fromhex(match[1] + "0x" + match[2].replace("_", ""))
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise OverflowError("value out of range")
    return value


def _float_converter(field, bits):
    def convert(input, /):
        try:
            value = _float(input)
            if bits == 32 and math.isfinite(value):
                value = struct.unpack("f", struct.pack("f", value))[0]
                # rounding to single precision may overflow
                if math.isinf(value):
                    raise OverflowError("value out of range")
        except (ValueError, OverflowError) as error:
            raise FailToParseFloatError(
                "cannot parse %r as a %d-bit floating point number for field %r" % (input, bits, field),
                title="invalid floating point number",
                code=FaultCode.FAIL_TO_PARSE_FLOAT,
                hint="give a number such as 1.5 or 2e10",
                field=field,
                input=input,
                bit_size=bits,
            ) from error
        return value
    return rename(convert, "parse_float%d" % bits)


def _converter(field, hint):
    """
    return a str -> value converter for a scalar field type, or Unset when the
    type cannot hold an option parameter.
    """
    width = Unset
    if typing.get_origin(hint) is Annotated:
        hint, *metadata = typing.get_args(hint)
        width = next((item for item in metadata if isinstance(item, Width)), Unset)

    if hint is str:
        return str
    elif hint is int:
        width = coalesce(width, Width("int", 64))
    elif hint is float:
        width = coalesce(width, Width("float", 64))
    else:
        return Unset

    match width.kind:
        case "int":
            return _int_converter(field, width.bits)
        case "uint":
            return _uint_converter(field, width.bits)
        case "float":
            return _float_converter(field, width.bits)
        case _:
            raise ValueError("unknown numeric kind %r" % width.kind)


def _flag_setter(store, field):
    def setter(params, /):
        if params is not None:
            setattr(store, field, True)
    return rename(setter, "set_" + field)


def _scalar_setter(store, field, convert):
    def setter(params, /):
        if params:
            setattr(store, field, convert(params[0]))
    return rename(setter, "set_" + field)


def _array_setter(store, field, convert):
    def setter(params, /):
        if params is None:
            return
        setattr(store, field, [convert(param) for param in params])
    return rename(setter, "set_" + field)


def _defaults(literal, is_array):
    if not is_array:
        return [literal]
    if len(literal) > 1 and literal[0] == "[" and literal[-1] == "]":
        inner = literal[1:-1]
        return inner.split(",") if inner else []
    if len(literal) > 2 and literal[1] == "[" and literal[-1] == "]":
        inner = literal[2:-1]
        return inner.split(literal[0]) if inner else []
    return [literal]


def _check_store(store):
    cls = store if isinstance(store, type) else type(store)
    if cls is store or not dataclasses.is_dataclass(store) or cls.__dataclass_params__.frozen:
        raise OptionStoreIsNotChangeableError(
            "option store %r cannot be changed" % cls.__name__,
            title="option store is not changeable",
            code=FaultCode.OPTION_STORE_IS_NOT_CHANGEABLE,
            hint="pass an instance of a non-frozen dataclass",
            type=cls,
        )


def _derive_configs(store, **options):
    _check_store(store)
    hints = typing.get_type_hints(type(store), include_extras=True)

    configs = []
    for field in dataclasses.fields(store):
        spec = field.metadata.get(OPT, "")
        if not isinstance(spec, str):
            raise TypeError("field %r option spec must be a string" % field.name)

        names, sep, literal = spec.partition("=")
        name, *aliases = names.split(",")
        name = name or field.name.replace("_", "-")
        aliases = [alias for alias in aliases if alias]

        hint = hints[field.name]
        if hint is bool:
            if sep:
                trigger(DefaultIgnoredWarning(
                    "default %r of flag field %r is ignored" % (literal, field.name),
                    title="default ignored",
                    code=FaultCode.DEFAULT_IGNORED,
                    hint="remove everything from '=' in the option spec of %r" % field.name,
                    field=field.name,
                    input=literal,
                ), **options)
            configs.append(OptionConfig(name, *aliases, on_parsed=_flag_setter(store, field.name)))
            continue

        is_array = typing.get_origin(hint) is list
        if is_array:
            element, = typing.get_args(hint) or (Unset,)
            convert = _converter(field.name, element)
        else:
            convert = _converter(field.name, hint)

        if convert is Unset:
            raise IllegalOptionTypeError(
                "field %r has a type %r that cannot be an option" % (field.name, hint),
                title="illegal option type",
                code=FaultCode.ILLEGAL_OPTION_TYPE,
                hint="use bool, int, float, str, a sized alias or a list of them",
                field=field.name,
                type=hint,
            )

        setter = _array_setter if is_array else _scalar_setter
        configs.append(OptionConfig(
            name,
            *aliases,
            has_param=True,
            is_array=is_array,
            defaults=_defaults(literal, is_array) if sep else Unset,
            on_parsed=setter(store, field.name, convert),
        ))

    return configs


def derive_configs(store, /, *, shell=False, fancy=False, colorful=True):
    """
    derive option configurations from the fields of a dataclass instance.

    each config's on_parsed callback converts the parsed option parameters to
    the field type and stores them in the field.

    raises
    - OptionStoreIsNotChangeableError when store is not an instance of a
      non-frozen dataclass.
    - IllegalOptionTypeError when a field type cannot hold an option.
    """
    try:
        return _derive_configs(store, shell=shell, fancy=fancy, colorful=colorful)
    except ParseException as exception:
        trigger(exception, shell=shell, fancy=fancy, colorful=colorful)


def parse_for(args, store, /, *, shell=False, fancy=False, colorful=True):
    """
    parse command line arguments into the fields of a dataclass instance.

    returns
    - the command parameters as a list.

    raises
    - any ParseException subclass (outside shell mode); the exception's
      options["result"] is an empty ParsedArgs. Fields bound before a
      conversion failure keep their new values.
    """
    try:
        configs = _derive_configs(store, shell=shell, fancy=fancy, colorful=colorful)
        return _parse_with(args, configs).cmd_params
    except ParseException as exception:
        trigger(exception, result=ParsedArgs(), shell=shell, fancy=fancy, colorful=colorful)


__all__ = (
    # Functions
    "parse_for",
    "derive_configs",
    "option_field",

    # Types
    "Width",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",

    # Constants
    "OPT",
)

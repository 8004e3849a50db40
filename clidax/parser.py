r"""
Clidax tokenizer and option resolver.

Dialect
- "--" (first occurrence)        → end of options; consumed, every later token is a command parameter.
- "--name" / "--name=value"      → long option; name must match [A-Za-z][A-Za-z0-9-]*.
- "-abc" / "-abc=value"          → short option cluster; a, b and c are options, only c takes value.
- "-" and anything else          → command parameter.

Option parameters are only ever given inline after "=", so the scanner never
looks at the next token to decide what the current one means.

Entry points
- parse(args): every option-shaped token is collected under its own name.
- parse_with(args, configs): options are checked against OptionConfig
  declarations (aliases, arity, defaults, wildcard).

Failures
- Every fault is a ParseException subclass surfaced through trigger(). Its
  options carry "result", an empty ParsedArgs: nothing collected before the
  failing token is kept.

Quick example:
    >>> args = parse(["--foo-bar=A", "-a", "--baz", "-bc=3", "qux"])
    >>> args.cmd_params
    ['qux']
    >>> args.opt_params("c")
    ['3']
"""
import re
import string
import sys
from collections import deque

from .arguments import ANY_OPTION, OptionConfig, ParsedArgs
from .faults import *
from .utils import *

_LONG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9-]*")


def _parse_args(args, collect_cmd_param, collect_opt_params):
    """
    scan the raw arguments once and hand every classified token to a collector.

    parameters
    - args: iterable of raw argument strings.
    - collect_cmd_param(param): receives each command parameter.
    - collect_opt_params(name, params): receives each option occurrence with
      its parameter list ([] or [value]).

    raises
    - OptionHasInvalidCharError for a malformed option token; collectors may
      raise their own faults, which propagate unchanged.
    """
    tokens = deque(args)
    ended = False

    while tokens:
        token = tokens.popleft()

        if ended:
            collect_cmd_param(token)
            continue

        if token == "--":
            ended = True
            continue

        if token.startswith("--"):
            remainder = token[2:]
            name, sep, value = remainder.partition("=")
            if not _LONG_NAME.fullmatch(name):
                raise OptionHasInvalidCharError(
                    "option %r includes an invalid character" % remainder,
                    title="invalid option",
                    code=FaultCode.OPTION_HAS_INVALID_CHAR,
                    hint="long option names start with a letter followed by letters, digits or hyphens",
                    option=remainder,
                )
            collect_opt_params(name, [value] if sep else [])

        elif token.startswith("-") and token != "-":
            remainder = token[1:]
            cluster, sep, value = remainder.partition("=")
            if not cluster:
                raise OptionHasInvalidCharError(
                    "option %r includes an invalid character" % remainder,
                    title="invalid option",
                    code=FaultCode.OPTION_HAS_INVALID_CHAR,
                    hint="short options are single letters, e.g. -a or -abc=value",
                    option=remainder,
                )
            for index, char in enumerate(cluster):
                if char not in string.ascii_letters:
                    raise OptionHasInvalidCharError(
                        "option %r includes an invalid character" % cluster[index:],
                        title="invalid option",
                        code=FaultCode.OPTION_HAS_INVALID_CHAR,
                        hint="short options are single letters, e.g. -a or -abc=value",
                        option=cluster[index:],
                    )

            for char in cluster[:-1]:
                collect_opt_params(char, [])
            collect_opt_params(cluster[-1], [value] if sep else [])

        else:
            collect_cmd_param(token)


def _sysargs(args):
    return sys.argv[1:] if args is Unset else args


def parse(args=Unset, /, *, shell=False, fancy=False, colorful=True):
    """
    parse command line arguments without option configurations.

    parameters
    - args: raw arguments; sys.argv[1:] when omitted.
    - shell, fancy, colorful: how faults are surfaced (see trigger()).

    returns
    - ParsedArgs holding command parameters and every option under its literal name.

    raises
    - OptionHasInvalidCharError (outside shell mode).
    """
    cmd_params = []
    opt_params = {}

    def collect_opt_params(name, params):
        opt_params.setdefault(name, []).extend(params)

    try:
        _parse_args(_sysargs(args), cmd_params.append, collect_opt_params)
    except ParseException as exception:
        trigger(exception, result=ParsedArgs(), shell=shell, fancy=fancy, colorful=colorful)

    return ParsedArgs(cmd_params, opt_params)


def _check_configs(configs):
    """
    validate configs and build the name/alias lookup table.

    returns
    - (table, has_any): table maps every name and alias to its config;
      has_any tells whether a wildcard config is present.
    """
    table = {}
    has_any = False

    for config in configs:
        if not isinstance(config, OptionConfig):
            raise TypeError("parse_with() configs must be OptionConfig instances")

        if config.is_array and not config.has_param:
            raise ConfigIsArrayButHasNoParamError(
                "option %r is configured as an array but takes no parameter" % config.name,
                title="contradicting option config",
                code=FaultCode.CONFIG_IS_ARRAY_BUT_HAS_NO_PARAM,
                hint="set has_param=True or is_array=False",
                option=config.name,
            )

        if config.name == ANY_OPTION:
            has_any = True
            continue

        if config.defaults is not None and not config.has_param:
            raise ConfigHasDefaultButHasNoParamError(
                "option %r has defaults but takes no parameter" % config.name,
                title="contradicting option config",
                code=FaultCode.CONFIG_HAS_DEFAULT_BUT_HAS_NO_PARAM,
                hint="set has_param=True or remove the defaults",
                option=config.name,
            )

        table[config.name] = config
        for alias in config.aliases:
            table[alias] = config

    return table, has_any


def _parse_with(args, configs):
    table, has_any = _check_configs(configs)
    # no configs at all behaves like parse()
    permissive = has_any or not configs

    cmd_params = []
    opt_params = {}

    def collect_opt_params(name, params):
        try:
            config = table[name]
        except KeyError:
            if not permissive:
                raise UnconfiguredOptionError(
                    "unknown option %r" % name,
                    title="unconfigured option",
                    code=FaultCode.UNCONFIGURED_OPTION,
                    hint="remove the option or check its spelling",
                    option=name,
                ) from None
            opt_params.setdefault(name, []).extend(params)
            return

        if not config.has_param:
            if params:
                raise OptionTakesNoParamError(
                    "option %r takes no parameter" % name,
                    title="option takes no parameter",
                    code=FaultCode.OPTION_TAKES_NO_PARAM,
                    hint="remove everything from '=' (for example: %s)" % _spell(name),
                    option=config.name,
                )
        elif not params:
            raise OptionNeedsParamError(
                "option %r needs a parameter" % name,
                title="option needs a parameter",
                code=FaultCode.OPTION_NEEDS_PARAM,
                hint="add a value after '=' (for example: %s=<value>)" % _spell(name),
                option=config.name,
            )

        accumulated = opt_params.get(config.name, []) + params
        if not config.is_array and len(accumulated) > 1:
            raise OptionIsNotArrayError(
                "option %r cannot be given more than once" % name,
                title="option is not an array",
                code=FaultCode.OPTION_IS_NOT_ARRAY,
                hint="keep a single occurrence of %s" % _spell(name),
                option=config.name,
            )
        opt_params[config.name] = accumulated

    _parse_args(args, cmd_params.append, collect_opt_params)

    for config in configs:
        if config.name == ANY_OPTION:
            continue
        if config.defaults is not None and config.name not in opt_params:
            opt_params[config.name] = config.defaults

    for config in configs:
        if config.on_parsed is not None and config.name != ANY_OPTION:
            params = opt_params.get(config.name)
            config.on_parsed(None if params is None else list(params))

    return ParsedArgs(cmd_params, opt_params)


def _spell(name):
    return ("-" if len(name) == 1 else "--") + name


def parse_with(args, configs, /, *, shell=False, fancy=False, colorful=True):
    """
    parse command line arguments with option configurations.

    parameters
    - args: raw arguments.
    - configs: iterable of OptionConfig. An empty iterable parses like parse();
      otherwise only configured options (by name or alias) are accepted,
      unless a wildcard config (name ANY_OPTION) is present.
    - shell, fancy, colorful: how faults are surfaced (see trigger()).

    behavior
    - options are collected under their config's canonical name.
    - has_param/is_array decide how many parameters an option takes.
    - defaults are applied to configured options that did not appear.
    - on_parsed callbacks run last, in config order, with each option's
      parameter list (None when absent).

    raises
    - any ParseException subclass (outside shell mode); the exception's
      options["result"] is an empty ParsedArgs.
    """
    configs = list(configs)
    try:
        return _parse_with(args, configs)
    except ParseException as exception:
        trigger(exception, result=ParsedArgs(), shell=shell, fancy=fancy, colorful=colorful)


__all__ = (
    "parse",
    "parse_with",
)

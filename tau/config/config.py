"""
Environment variable overrides for argparse

Every optional argument may also be set by an environment variable named
after its long option, upper-cased with dashes turned into underscores
(``--set-flag`` is read from ``SET_FLAG``). Arguments given on the command
line take precedence over the environment.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any, Callable, List, Mapping, Optional, Sequence
from weakref import WeakSet

TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes", "on"})
FALSE_VALUES = frozenset({"0", "f", "false", "n", "no", "off"})

# Python 3.9+
_BOOLEAN_OPTIONAL = getattr(argparse, "BooleanOptionalAction", ())

# Parsers handled by parse_flag_set that are not FlagSet instances
_parsed: WeakSet = WeakSet()


class ConfigError(Exception):
    """Raised when flags cannot be configured from the environment."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class AlreadyParsedError(ConfigError):
    """Raised when a parser is parsed a second time."""


class FlagSet(argparse.ArgumentParser):
    """ArgumentParser that records whether it has parsed arguments."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.parsed = False

    def parse_known_args(self, args=None, namespace=None):
        result = super().parse_known_args(args, namespace)
        self.parsed = True
        return result


command_line = FlagSet()


def env_name(option: str) -> str:
    """
    Environment variable consulted for an option.

    Args:
        option: Option string or flag name, e.g. ``--set-flag``

    Returns:
        Variable name, e.g. ``SET_FLAG``
    """
    return option.lstrip("-").upper().replace("-", "_")


def update_usage(name: str, usage: Optional[str]) -> str:
    """Reflect the ability to set a flag via environment variable."""
    note = f"Also set by environment variable {name}"
    if not usage:
        return note
    return f"{usage}\n{note}"


def _flag_name(action: argparse.Action) -> str:
    for option in action.option_strings:
        if option.startswith("--"):
            return option
    return action.option_strings[0]


def _parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in TRUE_VALUES:
        return True
    if v in FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def _convert(action: argparse.Action, value: str) -> Any:
    """Convert an environment value the way argparse would for this action."""
    if isinstance(action, argparse._CountAction):
        return int(value)
    if isinstance(action, _BOOLEAN_OPTIONAL):
        return _parse_bool(value)
    if action.nargs == 0:
        # store_true / store_false / store_const
        if isinstance(action.const, bool):
            return action.const if _parse_bool(value) else not action.const
        return action.const if _parse_bool(value) else action.default

    convert: Callable[[str], Any] = action.type if callable(action.type) else str
    if isinstance(action, argparse._AppendAction) or action.nargs not in (None, "?"):
        result = [convert(v.strip()) for v in value.split(",") if v.strip()]
        invalid = [v for v in result if action.choices is not None and v not in action.choices]
    else:
        result = convert(value)
        invalid = [result] if action.choices is not None and result not in action.choices else []
    if invalid:
        choices = ", ".join(repr(c) for c in action.choices)
        raise ValueError(f"invalid choice: {invalid[0]!r} (choose from {choices})")
    return result


def _override(
    action: argparse.Action,
    environ: Mapping[str, str],
    defaults: dict,
) -> None:
    """Record an override for action if its environment variable is set."""
    name = _flag_name(action)
    env = env_name(name)
    if env not in environ:
        return
    value = environ[env]
    try:
        converted = _convert(action, value)
    except (TypeError, ValueError, argparse.ArgumentTypeError) as e:
        raise ConfigError(f"could not set {name.lstrip('-')} to {value}: {e}") from e
    if _converts_default(action):
        # argparse applies type to string defaults itself
        defaults[action.dest] = value
    else:
        defaults[action.dest] = converted


def _converts_default(action: argparse.Action) -> bool:
    if isinstance(action, (argparse._CountAction, argparse._AppendAction)):
        return False
    if isinstance(action, _BOOLEAN_OPTIONAL):
        return False
    return action.nargs in (None, "?")


def _is_parsed(parser: argparse.ArgumentParser) -> bool:
    if isinstance(parser, FlagSet):
        return parser.parsed
    return parser in _parsed


def parse_flag_set(
    args: Optional[Sequence[str]],
    parser: argparse.ArgumentParser,
    environ: Optional[Mapping[str, str]] = None,
) -> argparse.Namespace:
    """
    Parse args after applying environment overrides to parser.

    Must be called after all arguments are defined and before the parser
    is used to parse anything else.

    Args:
        args: Argument list without the program name, [] when None
        parser: Parser to configure and run
        environ: Mapping to read instead of os.environ

    Returns:
        Parsed namespace

    Raises:
        AlreadyParsedError: If the parser was already parsed
        ConfigError: If any environment value is invalid; nothing is applied
    """
    if _is_parsed(parser):
        raise AlreadyParsedError(
            "parse can only be called once and before the parser parses arguments"
        )
    environ = os.environ if environ is None else environ

    defaults: dict = {}
    errors: List[str] = []
    for action in parser._actions:
        if not action.option_strings:
            continue
        if isinstance(action, (argparse._HelpAction, argparse._VersionAction)):
            continue
        try:
            _override(action, environ, defaults)
        except ConfigError as e:
            errors.append(str(e))
        if action.help != argparse.SUPPRESS:
            action.help = update_usage(env_name(_flag_name(action)), action.help)

    if errors:
        raise ConfigError(f"parsing flags: {'; '.join(errors)}", errors)

    for action in parser._actions:
        if action.dest in defaults:
            action.required = False
    parser.set_defaults(**defaults)

    namespace = parser.parse_args(list(args) if args is not None else [])
    if not isinstance(parser, FlagSet):
        _parsed.add(parser)
    return namespace


def parse(args: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse the command line against command_line.

    Args:
        args: Arguments to parse, sys.argv[1:] when None
    """
    return parse_flag_set(sys.argv[1:] if args is None else args, command_line)

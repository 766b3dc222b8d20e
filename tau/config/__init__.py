"""
Configuration module

Adds environment variable overrides to argparse:
- FlagSet: ArgumentParser remembering whether it was parsed
- parse / parse_flag_set: apply overrides then parse arguments
- ConfigError / AlreadyParsedError: configuration failures
"""

from tau.config.config import (
    AlreadyParsedError,
    ConfigError,
    FlagSet,
    command_line,
    env_name,
    parse,
    parse_flag_set,
)

__all__ = [
    "AlreadyParsedError",
    "ConfigError",
    "FlagSet",
    "command_line",
    "env_name",
    "parse",
    "parse_flag_set",
]

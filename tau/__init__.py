"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

Tau - Developer convenience libraries
Structured Cloud Logging compatible logger, environment aware flags and
fail fast development helpers
"""

__version__ = "1.0.0"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

# Import submodules (not all classes by default)
from tau import config
from tau import dev
from tau import slog

__all__ = [
    "config",
    "dev",
    "slog",
]

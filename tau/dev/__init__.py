"""
Development helpers

Fail fast guards and a well defined not implemented error.
"""

from tau.dev.dev import UnimplementedError, fail_fast, not_implemented, verify

__all__ = ["UnimplementedError", "fail_fast", "not_implemented", "verify"]

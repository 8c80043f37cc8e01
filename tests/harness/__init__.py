"""Test helpers for codepaint.

Re-exports all public API for convenient imports:
    from tests.harness import strip_ansi, escapes, scope
"""

from tests.harness.ansi import ANSI_RE, escapes, strip_ansi
from tests.harness.builders import scope

__all__ = ["ANSI_RE", "escapes", "scope", "strip_ansi"]

# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Construction-time accessibility auditing for declarative element trees.

`treea11y.ui` is a small function-component element builder; activating an
audit on it (`activate(treea11y.ui, ...)`) checks every element as it is
constructed and reports violations as `A11yWarning`s or raised
`A11yViolationError`s.
"""
from .accessibility import (
    A11yConfigurationError,
    A11yViolationError,
    A11yWarning,
    AuditConfig,
    AuditSession,
    Violation,
    activate,
    deactivate,
    default_registry,
    resolve_options,
    run_rules,
)

__version__ = "0.3.0"

__all__ = [
    "A11yConfigurationError",
    "A11yViolationError",
    "A11yWarning",
    "AuditConfig",
    "AuditSession",
    "Violation",
    "__version__",
    "activate",
    "deactivate",
    "default_registry",
    "resolve_options",
    "run_rules",
]

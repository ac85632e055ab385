from __future__ import annotations

from .engine import RuleEngine, run_rules
from .identity import assign_id, next_id, reset_id_counter
from .labels import MAX_COMPOSITE_DEPTH, check_label, has_label
from .notify import A11yViolationError, A11yWarning, report
from .options import A11yConfigurationError, AuditConfig, resolve_options
from .rules import MOBILE_EXCLUSIONS, RuleRegistry, default_registry
from .runtime import AuditSession, activate, active_session, deactivate
from .types import LabelRule, Node, Rule, RuleFamily, Violation

__all__ = [
    "A11yConfigurationError",
    "A11yViolationError",
    "A11yWarning",
    "AuditConfig",
    "AuditSession",
    "LabelRule",
    "MAX_COMPOSITE_DEPTH",
    "MOBILE_EXCLUSIONS",
    "Node",
    "Rule",
    "RuleEngine",
    "RuleFamily",
    "RuleRegistry",
    "Violation",
    "activate",
    "active_session",
    "assign_id",
    "check_label",
    "deactivate",
    "default_registry",
    "has_label",
    "next_id",
    "report",
    "reset_id_counter",
    "resolve_options",
    "run_rules",
]

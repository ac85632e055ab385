from __future__ import annotations

import warnings
from typing import Any, Callable

from .options import AuditConfig
from .types import Violation

Lookup = Callable[[str], Any]
Subscribe = Callable[[Callable[[Lookup], None]], None]

SOURCE_NODE_LABEL = "Source Node: "


class A11yWarning(UserWarning):
    def __init__(
        self,
        message: str,
        violation: Violation | None = None,
        source_node: Any = None,
    ) -> None:
        super().__init__(message)
        self.violation = violation
        self.source_node = source_node


class A11yViolationError(ValueError):
    def __init__(self, message: str, violation: Violation) -> None:
        super().__init__(message)
        self.violation = violation


def should_report(violation: Violation, config: AuditConfig) -> bool:
    if config.filter_fn is None:
        return True
    return bool(config.filter_fn(violation.node_label, violation.id))


def compose_message(violation: Violation, config: AuditConfig) -> str:
    return f"{config.warning_prefix}{violation.node_label} {violation.message}"


def _outer_markup(node: Any) -> str:
    to_html = getattr(node, "to_html", None)
    if callable(to_html):
        return str(to_html())
    return str(node)


def _warn(message: str, violation: Violation, source_node: Any = None) -> None:
    warnings.warn(A11yWarning(message, violation, source_node), stacklevel=3)


def report(violation: Violation, config: AuditConfig, subscribe: Subscribe | None = None) -> None:
    """Emit one violation: raise it, warn now, or warn once the node is mounted."""
    if not should_report(violation, config):
        return
    message = compose_message(violation, config)

    if config.throw_on_failure:
        if config.include_src_node and violation.id:
            message = f"{message} {violation.id}"
        raise A11yViolationError(message, violation)

    if not config.include_src_node or subscribe is None or violation.id is None:
        _warn(message, violation)
        return

    def emit_after_mount(lookup: Lookup) -> None:
        source = lookup(violation.id)
        if source is None:
            _warn(message, violation)
        elif config.include_src_as_string:
            markup = _outer_markup(source)
            _warn(f"{message}\n{SOURCE_NODE_LABEL}{markup}", violation, markup)
        else:
            _warn(message, violation, source)

    subscribe(emit_after_mount)

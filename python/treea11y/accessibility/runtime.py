from __future__ import annotations

import threading
from typing import Any, Mapping

from .engine import RuleEngine
from .identity import assign_id
from .notify import report
from .options import A11yConfigurationError, AuditConfig, resolve_options
from .rules import RuleRegistry
from .types import Node, Violation

_HOST_CAPABILITIES = (
    "install_construction_hook",
    "remove_construction_hook",
    "current_owner",
    "resolve_composite",
)

_sessions_lock = threading.Lock()
_sessions: dict[int, "AuditSession"] = {}


def _require_host(host: Any) -> None:
    if host is None:
        raise A11yConfigurationError("Missing parameter: host framework")
    missing = [name for name in _HOST_CAPABILITIES if not callable(getattr(host, name, None))]
    if missing:
        raise A11yConfigurationError(
            f"Missing parameter: host framework {host!r} lacks {', '.join(missing)}"
        )


class AuditSession:
    """An activated audit: one configuration bound to one host's construction hook."""

    def __init__(self, host: Any, config: AuditConfig, registry: RuleRegistry | None = None) -> None:
        self.host = host
        self.config = config
        self.engine = RuleEngine(registry)
        self.active = False

    def audit(self, tag: str, props: dict[str, Any], children: list[Any]) -> tuple[list[Violation], dict[str, Any]]:
        """Audit one construction call and return its violations and augmented props."""
        attributes = assign_id(props)
        owner = self.host.current_owner()
        owner_name = getattr(owner, "name", None) if owner is not None else None
        node = Node.build(tag, attributes, children)
        violations = self.engine.run(
            node,
            self.config,
            resolve=self.host.resolve_composite,
            owner_name=owner_name,
        )
        return violations, attributes

    def construction_hook(self, tag: str, props: dict[str, Any], children: list[Any]) -> dict[str, Any]:
        violations, attributes = self.audit(tag, props, children)
        owner = self.host.current_owner()
        subscribe = None
        if self.config.include_src_node and owner is not None:
            subscribe = getattr(owner, "after_render", None)
        for violation in violations:
            report(violation, self.config, subscribe)
        return attributes

    def deactivate(self) -> None:
        with _sessions_lock:
            if _sessions.get(id(self.host)) is self:
                _sessions.pop(id(self.host), None)
                self.host.remove_construction_hook()
        self.active = False

    def __enter__(self) -> "AuditSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.deactivate()


def activate(
    host: Any,
    options: Mapping[str, Any] | AuditConfig | None = None,
    *,
    registry: RuleRegistry | None = None,
    **kwargs: Any,
) -> AuditSession:
    """Install the audit hook on `host`, replacing any previous activation."""
    _require_host(host)
    config = resolve_options(options, **kwargs)
    session = AuditSession(host, config, registry)
    with _sessions_lock:
        previous = _sessions.get(id(host))
        if previous is not None:
            previous.active = False
        host.install_construction_hook(session.construction_hook)
        _sessions[id(host)] = session
        session.active = True
    return session


def deactivate(host: Any) -> None:
    with _sessions_lock:
        session = _sessions.pop(id(host), None)
    if session is not None:
        session.active = False
    if host is not None and callable(getattr(host, "remove_construction_hook", None)):
        host.remove_construction_hook()


def active_session(host: Any) -> AuditSession | None:
    return _sessions.get(id(host))

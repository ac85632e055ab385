from __future__ import annotations

from typing import Any, Mapping, Sequence

from .options import AuditConfig
from .rules import RuleRegistry, default_registry
from .types import LabelRule, Node, Resolver, Rule, Violation


class RuleEngine:
    """Runs tag, attribute and label rules against one node."""

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def run(
        self,
        node: Node,
        config: AuditConfig | None = None,
        *,
        resolve: Resolver | None = None,
        owner_name: str | None = None,
    ) -> list[Violation]:
        config = config if config is not None else AuditConfig()
        label = owner_name or node.default_label
        violations: list[Violation] = []

        def fail(rule: Rule | LabelRule) -> None:
            violations.append(
                Violation(
                    rule_id=rule.id,
                    tag=node.tag,
                    node_label=label,
                    id=node.id,
                    message=rule.message,
                )
            )

        for rule in self.registry.rules_for_tag(node.tag):
            if config.is_excluded(rule.id):
                continue
            if not rule.test(node.tag, node.attributes, node.children):
                fail(rule)

        for name, value in node.attributes.items():
            if value is None:
                continue
            for rule in self.registry.rules_for_attribute(name):
                if config.is_excluded(rule.id):
                    continue
                if not rule.test(node.tag, node.attributes, node.children):
                    fail(rule)

        for label_rule in self.registry.label_rules:
            if config.is_excluded(label_rule.id):
                continue
            label_rule.test(
                node.tag,
                node.attributes,
                node.children,
                lambda rule=label_rule: fail(rule),
                resolve,
            )
        return violations


_default_engine: RuleEngine | None = None


def run_rules(
    tag: str,
    props: Mapping[str, Any] | None,
    children: Sequence[Any] = (),
    config: AuditConfig | None = None,
    *,
    resolve: Resolver | None = None,
    owner_name: str | None = None,
) -> list[Violation]:
    global _default_engine
    if _default_engine is None:
        _default_engine = RuleEngine()
    node = Node.build(tag, props, children)
    return _default_engine.run(node, config, resolve=resolve, owner_name=owner_name)

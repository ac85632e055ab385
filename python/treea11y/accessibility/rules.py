from __future__ import annotations

import re
from typing import Any, Iterator, Mapping, Sequence

from .labels import check_label, is_hidden_from_at, is_interactive, role_of
from .types import LabelRule, Rule, RuleFamily

MOBILE_EXCLUSIONS = ("BUTTON_ROLE_SPACE", "BUTTON_ROLE_ENTER")

_REDUNDANT_ALT_RE = re.compile(r"\b(image|picture|photo)\b", re.IGNORECASE)


class RuleRegistry:
    """Typed tables of tag, attribute and label rules, keyed by name."""

    def __init__(self) -> None:
        self.tag_rules: dict[str, list[Rule]] = {}
        self.attribute_rules: dict[str, list[Rule]] = {}
        self.label_rules: list[LabelRule] = []
        self._by_id: dict[str, Rule | LabelRule] = {}

    def _claim(self, rule: Rule | LabelRule) -> None:
        if not rule.id:
            raise ValueError("Rule id must not be empty")
        if not rule.message:
            raise ValueError(f"Rule {rule.id!r} requires a message")
        if rule.id in self._by_id:
            raise ValueError(f"Duplicate rule id {rule.id!r}")
        self._by_id[rule.id] = rule

    def register_tag_rule(self, tag: str, rule: Rule) -> Rule:
        if rule.family is not RuleFamily.TAG:
            raise ValueError(f"Rule {rule.id!r} is not a tag rule")
        self._claim(rule)
        self.tag_rules.setdefault(str(tag).strip().lower(), []).append(rule)
        return rule

    def register_attribute_rule(self, attribute: str, rule: Rule) -> Rule:
        if rule.family is not RuleFamily.ATTRIBUTE:
            raise ValueError(f"Rule {rule.id!r} is not an attribute rule")
        self._claim(rule)
        self.attribute_rules.setdefault(attribute, []).append(rule)
        return rule

    def register_label_rule(self, rule: LabelRule) -> LabelRule:
        self._claim(rule)
        self.label_rules.append(rule)
        return rule

    def rules_for_tag(self, tag: str) -> list[Rule]:
        return list(self.tag_rules.get(tag, ()))

    def rules_for_attribute(self, attribute: str) -> list[Rule]:
        return list(self.attribute_rules.get(attribute, ()))

    def get(self, rule_id: str) -> Rule | LabelRule | None:
        return self._by_id.get(rule_id)

    def rule_ids(self) -> list[str]:
        return list(self._by_id)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def __iter__(self) -> Iterator[Rule | LabelRule]:
        return iter(self._by_id.values())

    def describe(self) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        for tag, rules in self.tag_rules.items():
            rows.extend(
                {"id": r.id, "family": r.family.value, "key": tag, "message": r.message}
                for r in rules
            )
        for attribute, rules in self.attribute_rules.items():
            rows.extend(
                {"id": r.id, "family": r.family.value, "key": attribute, "message": r.message}
                for r in rules
            )
        rows.extend(
            {"id": r.id, "family": r.family.value, "key": None, "message": r.message}
            for r in self.label_rules
        )
        return rows


def _has(attributes: Mapping[str, Any], name: str) -> bool:
    return attributes.get(name) is not None


def _hash_href_needs_button(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    return not (not role_of(attributes) and attributes.get("href") == "#")


def _tabindex_needs_button(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    return not (
        not role_of(attributes) and _has(attributes, "tabindex") and not attributes.get("href")
    )


def _missing_alt(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    return _has(attributes, "alt")


def _redundant_alt(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    alt = attributes.get("alt")
    if alt is None:
        return True
    return _REDUNDANT_ALT_RE.search(str(alt)) is None


def _no_tabindex(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    return is_interactive(tag, attributes) or _has(attributes, "tabindex")


def _button_role_space(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    if role_of(attributes) != "button":
        return True
    return _has(attributes, "onkeydown") or _has(attributes, "onkeyup")


def _button_role_enter(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    if role_of(attributes) != "button":
        return True
    return _has(attributes, "onkeydown") or _has(attributes, "onkeypress")


def _no_role(tag: str, attributes: Mapping[str, Any], children: Sequence[Any]) -> bool:
    if is_hidden_from_at(attributes):
        return True
    return is_interactive(tag, attributes) or bool(role_of(attributes))


def _tabindex_required_when_aria_hidden(
    tag: str, attributes: Mapping[str, Any], children: Sequence[Any]
) -> bool:
    if not (is_interactive(tag, attributes) and is_hidden_from_at(attributes)):
        return True
    return str(attributes.get("tabindex")).strip() == "-1"


HASH_HREF_NEEDS_BUTTON = Rule(
    "HASH_HREF_NEEDS_BUTTON",
    'You have an anchor with `href="#"` and no `role`. Add `role="button"`, '
    "or better yet, use a <button>.",
    RuleFamily.TAG,
    _hash_href_needs_button,
)
TABINDEX_NEEDS_BUTTON = Rule(
    "TABINDEX_NEEDS_BUTTON",
    "You have an anchor with a `tabindex`, no `href` and no `role`. "
    'Add `role="button"`, or better yet, use a <button>.',
    RuleFamily.TAG,
    _tabindex_needs_button,
)
MISSING_ALT = Rule(
    "MISSING_ALT",
    "You forgot an `alt` attribute on an image. Screen-reader users will not "
    'know what it is. Use `alt=""` for purely decorative images.',
    RuleFamily.TAG,
    _missing_alt,
)
REDUNDANT_ALT = Rule(
    "REDUNDANT_ALT",
    "Screen readers already announce `img` elements as images; you do not "
    'need words like "image", "picture" or "photo" in the `alt` text.',
    RuleFamily.TAG,
    _redundant_alt,
)
NO_TABINDEX = Rule(
    "NO_TABINDEX",
    "You have a click handler on a non-interactive element but no `tabindex`. "
    "Keyboard users will not be able to reach or activate it.",
    RuleFamily.ATTRIBUTE,
    _no_tabindex,
)
BUTTON_ROLE_SPACE = Rule(
    "BUTTON_ROLE_SPACE",
    'You have `role="button"` but no `onkeydown` handler. Add one and have '
    "the Space key do the same thing as the click handler.",
    RuleFamily.ATTRIBUTE,
    _button_role_space,
)
BUTTON_ROLE_ENTER = Rule(
    "BUTTON_ROLE_ENTER",
    'You have `role="button"` but no `onkeydown` handler. Add one and have '
    "the Enter key do the same thing as the click handler.",
    RuleFamily.ATTRIBUTE,
    _button_role_enter,
)
NO_ROLE = Rule(
    "NO_ROLE",
    "You have a click handler on a non-interactive element but no ARIA `role`. "
    'Screen readers cannot tell users what it does; add a role such as "button".',
    RuleFamily.ATTRIBUTE,
    _no_role,
)
TABINDEX_REQUIRED_WHEN_ARIA_HIDDEN = Rule(
    "TABINDEX_REQUIRED_WHEN_ARIA_HIDDEN",
    '`aria-hidden="true"` is applied to an interactive element that is still in '
    'the tab order. Add `tabindex="-1"` to avoid a hidden tab stop.',
    RuleFamily.ATTRIBUTE,
    _tabindex_required_when_aria_hidden,
)
NO_LABEL = LabelRule(
    "NO_LABEL",
    "You have an unlabeled element or control. Add an `aria-label` or "
    "`aria-labelledby` attribute, or put some text in the element.",
    check_label,
)


def default_registry() -> RuleRegistry:
    registry = RuleRegistry()
    registry.register_tag_rule("a", HASH_HREF_NEEDS_BUTTON)
    registry.register_tag_rule("a", TABINDEX_NEEDS_BUTTON)
    registry.register_tag_rule("img", MISSING_ALT)
    registry.register_tag_rule("img", REDUNDANT_ALT)
    registry.register_attribute_rule("onclick", NO_TABINDEX)
    registry.register_attribute_rule("onclick", BUTTON_ROLE_SPACE)
    registry.register_attribute_rule("onclick", BUTTON_ROLE_ENTER)
    registry.register_attribute_rule("onclick", NO_ROLE)
    registry.register_attribute_rule("aria-hidden", TABINDEX_REQUIRED_WHEN_ARIA_HIDDEN)
    registry.register_label_rule(NO_LABEL)
    return registry

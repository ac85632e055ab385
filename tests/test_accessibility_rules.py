from __future__ import annotations

import pytest

from treea11y.accessibility import (
    AuditConfig,
    MOBILE_EXCLUSIONS,
    Rule,
    RuleFamily,
    RuleRegistry,
    default_registry,
    resolve_options,
    run_rules,
)


def _ids(violations) -> list[str]:
    return [v.rule_id for v in violations]


def test_default_registry_groups_rules_by_family() -> None:
    registry = default_registry()
    assert [r.id for r in registry.rules_for_tag("a")] == [
        "HASH_HREF_NEEDS_BUTTON",
        "TABINDEX_NEEDS_BUTTON",
    ]
    assert [r.id for r in registry.rules_for_tag("img")] == ["MISSING_ALT", "REDUNDANT_ALT"]
    assert [r.id for r in registry.rules_for_attribute("onclick")] == [
        "NO_TABINDEX",
        "BUTTON_ROLE_SPACE",
        "BUTTON_ROLE_ENTER",
        "NO_ROLE",
    ]
    assert [r.id for r in registry.label_rules] == ["NO_LABEL"]
    assert registry.rules_for_tag("section") == []
    assert all(rule.message for rule in registry)


def test_registry_rejects_duplicate_ids_and_wrong_family() -> None:
    registry = RuleRegistry()
    rule = Rule("CUSTOM", "custom message", RuleFamily.TAG, lambda tag, attrs, children: True)
    registry.register_tag_rule("div", rule)
    with pytest.raises(ValueError):
        registry.register_tag_rule("span", rule)
    with pytest.raises(ValueError):
        registry.register_attribute_rule(
            "title", Rule("OTHER", "msg", RuleFamily.TAG, lambda tag, attrs, children: True)
        )
    assert "CUSTOM" in registry
    assert registry.get("CUSTOM") is rule


def test_describe_lists_every_rule_once() -> None:
    rows = default_registry().describe()
    ids = [row["id"] for row in rows]
    assert len(ids) == len(set(ids)) == 10
    assert {"id": "NO_LABEL", "family": "label", "key": None} == {
        k: rows[-1][k] for k in ("id", "family", "key")
    }


def test_button_role_needs_key_handler(click) -> None:
    ids = _ids(run_rules("span", {"onClick": click, "role": "button", "id": "s"}))
    assert "BUTTON_ROLE_SPACE" in ids
    assert "BUTTON_ROLE_ENTER" in ids

    ids = _ids(run_rules("span", {"onClick": click, "onKeyDown": click, "role": "button", "id": "s"}))
    assert "BUTTON_ROLE_SPACE" not in ids
    assert "BUTTON_ROLE_ENTER" not in ids


def test_python_style_attribute_names_are_normalized(click) -> None:
    ids = _ids(run_rules("span", {"on_click": click, "role": "button", "on_key_down": click, "id": "s"}))
    assert "BUTTON_ROLE_SPACE" not in ids
    ids = _ids(run_rules("div", {"on_click": click, "tab_index": 0, "id": "d"}))
    assert "NO_TABINDEX" not in ids


def test_click_handler_without_role_or_tabindex(click) -> None:
    ids = _ids(run_rules("div", {"onClick": click, "id": "d"}))
    assert "NO_ROLE" in ids
    assert "NO_TABINDEX" in ids

    assert "NO_ROLE" not in _ids(run_rules("div", {"onClick": click, "role": "button", "id": "d"}))
    assert "NO_ROLE" not in _ids(run_rules("a", {"aria-hidden": "true", "onClick": click, "id": "a"}))
    assert "NO_TABINDEX" not in _ids(run_rules("div", {"onClick": click, "tabIndex": "0", "id": "d"}))
    assert "NO_TABINDEX" not in _ids(run_rules("a", {"onClick": click, "href": "foo", "id": "a"}))
    assert "NO_TABINDEX" not in _ids(run_rules("button", {"onClick": click, "id": "b"}))


@pytest.mark.parametrize(
    ("tag", "props", "expected"),
    [
        ("a", {"aria-hidden": "true", "href": "/foo"}, True),
        ("a", {"aria-hidden": "true", "tabIndex": "0"}, True),
        ("a", {"aria-hidden": "true"}, True),
        ("a", {"aria-hidden": "true", "tabIndex": "-1"}, False),
        ("a", {"aria-hidden": "true", "tabIndex": -1}, False),
        ("div", {"aria-hidden": "true"}, False),
        ("a", {"aria-hidden": "false", "tabIndex": "-1"}, False),
    ],
)
def test_aria_hidden_interactive_needs_negative_tabindex(tag, props, expected) -> None:
    ids = _ids(run_rules(tag, {**props, "id": "x"}))
    assert ("TABINDEX_REQUIRED_WHEN_ARIA_HIDDEN" in ids) is expected


def test_img_alt_rules() -> None:
    assert "MISSING_ALT" in _ids(run_rules("img", {"src": "foo.jpg", "id": "i"}))
    assert "MISSING_ALT" not in _ids(run_rules("img", {"src": "foo.jpg", "alt": "a foo, ofc", "id": "i"}))
    assert "MISSING_ALT" not in _ids(run_rules("img", {"src": "spacer.gif", "alt": "", "id": "i"}))
    assert "REDUNDANT_ALT" in _ids(run_rules("img", {"src": "cat.gif", "alt": "image of a cat", "id": "i"}))
    assert "REDUNDANT_ALT" in _ids(run_rules("img", {"src": "cat.gif", "alt": "Picture of a cat", "id": "i"}))
    assert "REDUNDANT_ALT" not in _ids(run_rules("img", {"src": "cat.gif", "alt": "imagery", "id": "i"}))


def test_excluding_redundant_alt_leaves_other_outcomes_unchanged() -> None:
    props = {"src": "cat.gif", "alt": "image of a cat", "id": "i"}
    baseline = run_rules("img", props)
    excluded = run_rules("img", props, config=resolve_options(exclude=["REDUNDANT_ALT"]))
    assert [v for v in baseline if v.rule_id != "REDUNDANT_ALT"] == excluded
    assert "REDUNDANT_ALT" in _ids(baseline)


def test_anchor_placeholder_rules(click) -> None:
    assert "HASH_HREF_NEEDS_BUTTON" in _ids(run_rules("a", {"onClick": click, "href": "#", "id": "a"}))
    assert "HASH_HREF_NEEDS_BUTTON" not in _ids(run_rules("a", {"onClick": click, "href": "/foo/bar", "id": "a"}))
    assert "HASH_HREF_NEEDS_BUTTON" not in _ids(run_rules("a", {"class_name": "foo", "id": "a"}))
    assert "TABINDEX_NEEDS_BUTTON" in _ids(run_rules("a", {"onClick": click, "tabIndex": "0", "id": "a"}))
    assert "TABINDEX_NEEDS_BUTTON" not in _ids(run_rules("a", {"class_name": "foo", "id": "a"}))


def test_mobile_profile_drops_key_handler_rules(click) -> None:
    config = resolve_options(device=["mobile"])
    assert set(MOBILE_EXCLUSIONS) <= config.excluded
    ids = _ids(run_rules("span", {"onClick": click, "role": "button", "id": "s"}, config=config))
    assert "BUTTON_ROLE_SPACE" not in ids
    assert "BUTTON_ROLE_ENTER" not in ids
    assert "NO_TABINDEX" in ids


def test_null_attributes_do_not_trigger_attribute_rules() -> None:
    ids = _ids(run_rules("div", {"onClick": None, "aria-hidden": None, "id": "d"}))
    assert ids == []


def test_same_node_audited_twice_yields_same_violations(click) -> None:
    props = {"onClick": click, "role": "button", "id": "fixed"}
    config = AuditConfig()
    assert run_rules("span", props, config=config) == run_rules("span", props, config=config)

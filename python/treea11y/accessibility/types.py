from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence


AttributeTest = Callable[[str, Mapping[str, Any], Sequence[Any]], bool]
Resolver = Callable[[Any], Any]
LabelTest = Callable[
    [str, Mapping[str, Any], Sequence[Any], Callable[[], None], "Resolver | None"],
    None,
]


class RuleFamily(str, Enum):
    TAG = "tag"
    ATTRIBUTE = "attribute"
    LABEL = "label"


def normalize_attr_name(name: Any) -> str:
    """Map Python and DOM attribute spellings onto one lower-case key.

    `class_name` -> `class`, `aria_hidden` -> `aria-hidden`,
    `onClick`/`on_click` -> `onclick`, `tabIndex`/`tab_index` -> `tabindex`.
    """
    text = str(name).strip()
    if text == "class_name":
        return "class"
    lowered = text.replace("_", "-").lower()
    if lowered.startswith("on") or lowered == "tab-index":
        return lowered.replace("-", "")
    return lowered


def normalize_attributes(props: Mapping[str, Any] | None) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in (props or {}).items():
        out[normalize_attr_name(key)] = value
    return out


@dataclass(frozen=True)
class Node:
    tag: str
    attributes: Mapping[str, Any]
    children: tuple[Any, ...] = ()

    @classmethod
    def build(cls, tag: str, props: Mapping[str, Any] | None, children: Sequence[Any] = ()) -> "Node":
        attributes = normalize_attributes(props)
        content = tuple(children)
        if not content and attributes.get("children") is not None:
            passed = attributes["children"]
            content = tuple(passed) if isinstance(passed, (list, tuple)) else (passed,)
        return cls(
            tag=str(tag).strip().lower(),
            attributes=MappingProxyType(attributes),
            children=content,
        )

    @property
    def id(self) -> str | None:
        value = self.attributes.get("id")
        return None if value is None else str(value)

    @property
    def default_label(self) -> str:
        return f"{self.tag}#{self.id}"


@dataclass(frozen=True)
class Rule:
    id: str
    message: str
    family: RuleFamily
    test: AttributeTest = field(repr=False, compare=False)


@dataclass(frozen=True)
class LabelRule:
    id: str
    message: str
    test: LabelTest = field(repr=False, compare=False)
    family: RuleFamily = RuleFamily.LABEL


@dataclass(frozen=True)
class Violation:
    rule_id: str
    tag: str
    node_label: str
    id: str | None
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "tag": self.tag,
            "node_label": self.node_label,
            "id": self.id,
            "message": self.message,
        }

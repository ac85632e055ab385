from __future__ import annotations

import numbers
from typing import Any, Callable, Iterable, Mapping, Sequence

from .types import Resolver, normalize_attributes

INTERACTIVE_TAGS = {"a", "button", "input", "select", "textarea"}
IMAGE_TAGS = {"img", "area"}
PRESENTATION_ROLES = {"presentation", "none"}
HIDDEN_INPUT_TYPES = {"hidden"}

# Nested component resolutions followed along one search path.
MAX_COMPOSITE_DEPTH = 32


def _is_blank(value: Any) -> bool:
    return value is None or value is False or str(value).strip() == ""


def is_hidden_from_at(attributes: Mapping[str, Any]) -> bool:
    value = attributes.get("aria-hidden")
    if _is_blank(value):
        return False
    return str(value).strip().lower() != "false"


def is_interactive(tag: str, attributes: Mapping[str, Any]) -> bool:
    if tag == "input":
        return str(attributes.get("type") or "").strip().lower() not in HIDDEN_INPUT_TYPES
    return tag in INTERACTIVE_TAGS


def role_of(attributes: Mapping[str, Any]) -> str:
    return str(attributes.get("role") or "").strip().lower()


def needs_label(tag: str, attributes: Mapping[str, Any]) -> bool:
    if is_hidden_from_at(attributes):
        return False
    role = role_of(attributes)
    if role in PRESENTATION_ROLES:
        return False
    if tag == "input" and str(attributes.get("type") or "").strip().lower() in HIDDEN_INPUT_TYPES:
        return False
    return is_interactive(tag, attributes) or bool(role) or attributes.get("onclick") is not None


def has_own_label(tag: str, attributes: Mapping[str, Any]) -> bool:
    if not _is_blank(attributes.get("aria-label")):
        return True
    if not _is_blank(attributes.get("aria-labelledby")):
        return True
    return tag in IMAGE_TAGS and not _is_blank(attributes.get("alt"))


def _is_element(content: Any) -> bool:
    return isinstance(getattr(content, "tag", None), str) and hasattr(content, "children")


def _content_has_label(content: Any, resolve: Resolver | None, depth: int) -> bool:
    if content is None or isinstance(content, bool):
        return False
    if isinstance(content, numbers.Number):
        return True
    if isinstance(content, str):
        return content.strip() != ""
    if isinstance(content, (list, tuple)):
        return _search(content, resolve, depth)
    if _is_element(content):
        tag = str(content.tag).strip().lower()
        attributes = normalize_attributes(getattr(content, "props", None))
        if tag in IMAGE_TAGS:
            return not _is_blank(attributes.get("alt"))
        nested = content.children
        if not nested and attributes.get("children") is not None:
            nested = [attributes["children"]]
        return _search(nested, resolve, depth)
    if resolve is None or depth >= MAX_COMPOSITE_DEPTH:
        return False
    try:
        output = resolve(content)
    except Exception:
        return False
    return _content_has_label(output, resolve, depth + 1)


def _search(children: Iterable[Any], resolve: Resolver | None, depth: int) -> bool:
    for child in children:
        if _content_has_label(child, resolve, depth):
            return True
    return False


def has_label(children: Sequence[Any], resolve: Resolver | None = None) -> bool:
    """Depth-first search of child content for accessible label text.

    Text (numbers included) labels the node, as does an image child with
    non-blank `alt`. Element children are searched recursively; anything
    else is treated as a component instance and searched through its
    resolved output. Resolution errors contribute nothing.
    """
    return _search(children, resolve, 0)


def check_label(
    tag: str,
    attributes: Mapping[str, Any],
    children: Sequence[Any],
    report_failure: Callable[[], None],
    resolve: Resolver | None = None,
) -> None:
    if not needs_label(tag, attributes):
        return
    if has_own_label(tag, attributes):
        return
    if has_label(children, resolve):
        return
    report_failure()

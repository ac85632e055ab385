from __future__ import annotations

import threading
from dataclasses import dataclass, field
from html import escape
from typing import Any, Callable, Iterator


ConstructionHook = Callable[[str, dict[str, Any], list[Any]], dict[str, Any]]

_hook_lock = threading.Lock()
_construction_hook: ConstructionHook | None = None
_local = threading.local()


@dataclass
class Element:
    tag: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list[Any] = field(default_factory=list)

    def to_html(self) -> str:
        return render_node(self)


@dataclass(eq=False)
class ComponentNode:
    """A lazily rendered function-component instance."""

    type: Callable[..., Any]
    props: dict[str, Any] = field(default_factory=dict)
    children: list[Any] = field(default_factory=list)
    _pending: list[Callable[[Callable[[str], Any]], None]] = field(
        default_factory=list, repr=False
    )

    @property
    def name(self) -> str:
        return str(
            getattr(self.type, "display_name", None)
            or getattr(self.type, "__name__", None)
            or type(self.type).__name__
        )

    def render(self) -> Any:
        return self.type(*self.children, **self.props)

    def after_render(self, callback: Callable[[Callable[[str], Any]], None]) -> None:
        """Register a callback for the next time this instance is attached or updated.

        The callback receives a lookup function mapping an element id to the
        mounted element (or None). Callbacks fire once per render pass. Only
        registrations made while a MountRoot is rendering are kept; renders
        outside a mount (render_node, to_html) drop them.
        """
        if not _state().mounting:
            return
        self._pending.append(callback)

    def _fire_rendered(self, lookup: Callable[[str], Any]) -> None:
        pending, self._pending = self._pending, []
        for callback in pending:
            callback(lookup)


def component(fn: Callable | None = None, *, display_name: str | None = None) -> Callable:
    """Marker decorator for function components."""

    def mark(target: Callable) -> Callable:
        target.__treea11y_component__ = True
        if display_name:
            target.display_name = display_name
        return target

    if fn is None:
        return mark
    return mark(fn)


def _state() -> threading.local:
    if not hasattr(_local, "owners"):
        _local.owners = []
        _local.suppressed = 0
        _local.mounting = 0
    return _local


def install_construction_hook(hook: ConstructionHook) -> None:
    global _construction_hook
    if not callable(hook):
        raise TypeError("construction hook must be callable")
    with _hook_lock:
        _construction_hook = hook


def remove_construction_hook() -> None:
    global _construction_hook
    with _hook_lock:
        _construction_hook = None


def current_construction_hook() -> ConstructionHook | None:
    return _construction_hook


def current_owner() -> ComponentNode | None:
    owners = _state().owners
    return owners[-1] if owners else None


def _render_as_owner(node: ComponentNode) -> Any:
    state = _state()
    state.owners.append(node)
    try:
        return node.render()
    finally:
        state.owners.pop()


def resolve_composite(node: Any) -> Any:
    """Render a component instance without triggering construction hooks."""
    if not isinstance(node, ComponentNode):
        return None
    state = _state()
    state.suppressed += 1
    try:
        return _render_as_owner(node)
    finally:
        state.suppressed -= 1


def _flatten(children: tuple[Any, ...] | list[Any]) -> list[Any]:
    flat: list[Any] = []
    for child in children:
        if child is None:
            continue
        if isinstance(child, (list, tuple)):
            flat.extend(_flatten(child))
        else:
            flat.append(child)
    return flat


def el(tag: str | Callable[..., Any], *children: Any, **props: Any) -> Element | ComponentNode:
    flat = _flatten(children)
    if callable(tag):
        return ComponentNode(type=tag, props=props, children=flat)
    if not flat and props.get("children") is not None:
        props = dict(props)
        flat = _flatten([props.pop("children")])
    hook = _construction_hook
    if hook is not None and not _state().suppressed:
        props = hook(tag, props, flat)
    return Element(tag=tag, props=props, children=flat)


def _normalize_attr_name(name: str) -> str:
    if name == "class_name":
        return "class"
    return name.replace("_", "-")


def _render_attrs(props: dict[str, Any]) -> str:
    parts: list[str] = []
    for key, value in props.items():
        if key == "children" or value is None or value is False or callable(value):
            continue
        attr = _normalize_attr_name(key)
        if value is True:
            parts.append(attr)
        else:
            parts.append(f'{attr}="{escape(str(value), quote=True)}"')
    return (" " + " ".join(parts)) if parts else ""


def render_node(node: Any) -> str:
    if node is None or isinstance(node, bool):
        return ""
    if isinstance(node, ComponentNode):
        return render_node(_render_as_owner(node))
    if isinstance(node, (list, tuple)):
        return "".join(render_node(child) for child in node)
    if isinstance(node, Element):
        attrs = _render_attrs(node.props)
        children_html = "".join(render_node(child) for child in node.children)
        return f"<{node.tag}{attrs}>{children_html}</{node.tag}>"
    return escape(str(node))


class MountRoot:
    """In-memory live tree: the host's stand-in for a document."""

    def __init__(self) -> None:
        self.tree: Any = None
        self.mounted = False
        self._index: dict[str, Element] = {}

    def render(self, node: Any) -> Any:
        instances: list[ComponentNode] = []
        state = _state()
        state.mounting += 1
        try:
            tree = self._expand(node, instances)
        finally:
            state.mounting -= 1
        index: dict[str, Element] = {}
        for element in _iter_elements(tree):
            element_id = element.props.get("id")
            if element_id is not None and str(element_id) not in index:
                index[str(element_id)] = element
        self.tree = tree
        self._index = index
        self.mounted = True
        for instance in instances:
            instance._fire_rendered(self.get_element_by_id)
        return tree

    def unmount(self) -> None:
        self.tree = None
        self._index = {}
        self.mounted = False

    def get_element_by_id(self, element_id: str) -> Element | None:
        return self._index.get(str(element_id))

    def to_html(self) -> str:
        return render_node(self.tree)

    def _expand(self, node: Any, instances: list[ComponentNode]) -> Any:
        if isinstance(node, ComponentNode):
            output = _render_as_owner(node)
            instances.append(node)
            return self._expand(output, instances)
        if isinstance(node, (list, tuple)):
            return [self._expand(child, instances) for child in node]
        if isinstance(node, Element):
            children = [self._expand(child, instances) for child in node.children]
            return Element(tag=node.tag, props=node.props, children=children)
        return node


def _iter_elements(node: Any) -> Iterator[Element]:
    if isinstance(node, Element):
        yield node
        for child in node.children:
            yield from _iter_elements(child)
    elif isinstance(node, (list, tuple)):
        for child in node:
            yield from _iter_elements(child)


def to_html(node: Any) -> str:
    return render_node(node)


def mount(node_or_component: Any, *, props: Any = None, root: MountRoot | None = None) -> MountRoot:
    mounted = node_or_component
    if callable(node_or_component) and not isinstance(node_or_component, ComponentNode):
        mounted = el(node_or_component, **(props or {}))
    target = root if root is not None else MountRoot()
    target.render(mounted)
    return target


def mount_component_html(node_or_component: Any, *, props: Any = None) -> str:
    return mount(node_or_component, props=props).to_html()

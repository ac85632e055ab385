from __future__ import annotations

from treea11y.ui import (
    ComponentNode,
    Element,
    MountRoot,
    component,
    current_owner,
    el,
    install_construction_hook,
    mount_component_html,
    remove_construction_hook,
    render_node,
    resolve_composite,
    to_html,
)


def test_render_node_attr_normalization() -> None:
    node = el(
        "section",
        "Hello <world>",
        el("span", 'Q"uote', class_name="child"),
        class_name="alpha beta",
        aria_hidden="true",
        hidden=True,
        disabled=False,
        on_click=lambda: None,
    )
    assert render_node(node) == (
        '<section class="alpha beta" aria-hidden="true" hidden>'
        "Hello &lt;world&gt;"
        '<span class="child">Q&quot;uote</span>'
        "</section>"
    )


def test_el_flattens_children_and_drops_none() -> None:
    node = el("ul", [el("li", "a"), None, (el("li", "b"),)], None)
    assert [child.tag for child in node.children] == ["li", "li"]


def test_el_with_callable_builds_lazy_component() -> None:
    calls: list[str] = []

    def Greeting(name: str = "world") -> object:
        calls.append(name)
        return el("p", f"hi {name}")

    node = el(Greeting, name="you")
    assert isinstance(node, ComponentNode)
    assert calls == []
    assert node.name == "Greeting"
    assert to_html(node) == "<p>hi you</p>"
    assert calls == ["you"]


def test_component_children_are_passed_positionally() -> None:
    def Card(*children: object, title: str) -> object:
        return el("div", el("h2", title), *children)

    html = render_node(el(Card, el("p", "body"), title="T"))
    assert html == "<div><h2>T</h2><p>body</p></div>"


def test_component_display_name() -> None:
    @component(display_name="FancyButton")
    def fancy() -> object:
        return el("button", "ok")

    @component
    def Plain() -> object:
        return None

    assert el(fancy).name == "FancyButton"
    assert el(Plain).name == "Plain"
    assert Plain.__treea11y_component__ is True


def test_construction_hook_rewrites_props() -> None:
    seen: list[tuple] = []

    def hook(tag, props, children):
        seen.append((tag, dict(props), list(children)))
        return {**props, "data_seen": "1"}

    install_construction_hook(hook)
    try:
        node = el("b", "x", title="t")
    finally:
        remove_construction_hook()
    assert seen == [("b", {"title": "t"}, ["x"])]
    assert node.props == {"title": "t", "data_seen": "1"}


def test_resolve_composite_suppresses_hooks_and_sets_owner() -> None:
    owners: list[object] = []
    hooked: list[str] = []

    def Inner() -> object:
        owners.append(current_owner())
        return el("span", "x")

    install_construction_hook(lambda tag, props, children: hooked.append(tag) or props)
    try:
        node = el(Inner)
        output = resolve_composite(node)
    finally:
        remove_construction_hook()
    assert isinstance(output, Element)
    assert hooked == []
    assert owners == [node]
    assert current_owner() is None
    assert resolve_composite("plain text") is None


def test_mount_root_indexes_ids_and_fires_callbacks_once_per_pass() -> None:
    fired: list[object] = []

    def Child() -> object:
        current_owner().after_render(lambda lookup: fired.append(lookup("inner")))
        return el("em", "hi", id="inner")

    root = MountRoot()
    tree = el("div", el(Child), id="outer")
    root.render(tree)
    assert root.get_element_by_id("outer").tag == "div"
    assert fired == [root.get_element_by_id("inner")]
    assert root.to_html() == '<div id="outer"><em id="inner">hi</em></div>'

    root.render(tree)
    assert len(fired) == 2

    root.unmount()
    assert root.get_element_by_id("outer") is None


def test_mount_component_html_passes_props_to_callable() -> None:
    def app(message: str) -> object:
        return el("div", message, class_name="payload")

    assert mount_component_html(app, props={"message": "ok"}) == '<div class="payload">ok</div>'

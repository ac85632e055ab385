from __future__ import annotations

from .core import (
    ComponentNode,
    Element,
    MountRoot,
    component,
    current_construction_hook,
    current_owner,
    el,
    install_construction_hook,
    mount,
    mount_component_html,
    remove_construction_hook,
    render_node,
    resolve_composite,
    to_html,
)

__all__ = [
    "ComponentNode",
    "Element",
    "MountRoot",
    "component",
    "current_construction_hook",
    "current_owner",
    "el",
    "install_construction_hook",
    "mount",
    "mount_component_html",
    "remove_construction_hook",
    "render_node",
    "resolve_composite",
    "to_html",
]

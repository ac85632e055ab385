from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from .rules import MOBILE_EXCLUSIONS

FilterFn = Callable[[str, "str | None"], Any]

INCLUDE_SRC_NODE_AS_STRING = "asString"

_OPTION_ALIASES = {
    "exclude": "exclude",
    "device": "device",
    "filter_fn": "filter_fn",
    "filterFn": "filter_fn",
    "include_src_node": "include_src_node",
    "includeSrcNode": "include_src_node",
    "warning_prefix": "warning_prefix",
    "warningPrefix": "warning_prefix",
    "throw_on_failure": "throw_on_failure",
    "throwOnFailure": "throw_on_failure",
    "throw": "throw_on_failure",
}


class A11yConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class AuditConfig:
    exclude: frozenset[str] = frozenset()
    device: frozenset[str] = frozenset()
    filter_fn: FilterFn | None = None
    include_src_node: bool | str = False
    warning_prefix: str = ""
    throw_on_failure: bool = False

    @property
    def excluded(self) -> frozenset[str]:
        if "mobile" in self.device:
            return self.exclude | frozenset(MOBILE_EXCLUSIONS)
        return self.exclude

    def is_excluded(self, rule_id: str) -> bool:
        return rule_id in self.excluded

    @property
    def include_src_as_string(self) -> bool:
        return self.include_src_node == INCLUDE_SRC_NODE_AS_STRING


def _as_name_set(value: Any, option: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Iterable):
        raise A11yConfigurationError(f"Option {option!r} expects a string or a list of strings")
    names = [str(item).strip() for item in value]
    return frozenset(name for name in names if name)


def _include_src_node(value: Any) -> bool | str:
    if value is None or value is False:
        return False
    if value is True:
        return True
    if isinstance(value, str) and value.strip().lower() == INCLUDE_SRC_NODE_AS_STRING.lower():
        return INCLUDE_SRC_NODE_AS_STRING
    raise A11yConfigurationError(
        f"Unsupported include_src_node {value!r}. Expected False, True, or 'asString'."
    )


def resolve_options(options: Mapping[str, Any] | AuditConfig | None = None, **overrides: Any) -> AuditConfig:
    """Resolve raw activation options into an immutable AuditConfig."""
    if isinstance(options, AuditConfig) and not overrides:
        return options
    raw: dict[str, Any] = {}
    if isinstance(options, AuditConfig):
        raw.update(
            exclude=options.exclude,
            device=options.device,
            filter_fn=options.filter_fn,
            include_src_node=options.include_src_node,
            warning_prefix=options.warning_prefix,
            throw_on_failure=options.throw_on_failure,
        )
    elif options is not None:
        if not isinstance(options, Mapping):
            raise A11yConfigurationError("Audit options must be a mapping")
        raw.update(options)
    raw.update(overrides)

    values: dict[str, Any] = {}
    for key, value in raw.items():
        name = _OPTION_ALIASES.get(key)
        if name is None:
            raise A11yConfigurationError(f"Unknown audit option {key!r}")
        values[name] = value

    filter_fn = values.get("filter_fn")
    if filter_fn is not None and not callable(filter_fn):
        raise A11yConfigurationError("filter_fn must be callable")
    prefix = values.get("warning_prefix")
    return AuditConfig(
        exclude=_as_name_set(values.get("exclude"), "exclude"),
        device=_as_name_set(values.get("device"), "device"),
        filter_fn=filter_fn,
        include_src_node=_include_src_node(values.get("include_src_node")),
        warning_prefix="" if prefix is None else str(prefix),
        throw_on_failure=bool(values.get("throw_on_failure", False)),
    )

from __future__ import annotations

import itertools
import threading
from typing import Any, Mapping

ID_PREFIX = "a11y-"

_lock = threading.Lock()
_counter = itertools.count()


def next_id() -> str:
    with _lock:
        n = next(_counter)
    return f"{ID_PREFIX}{n}"


def _has_id(value: Any) -> bool:
    return value is not None and str(value) != ""


def assign_id(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of `attributes` carrying an `id`.

    Caller-supplied ids are kept as-is; otherwise a process-unique
    `a11y-<n>` id is generated.
    """
    out = dict(attributes or {})
    if not _has_id(out.get("id")):
        out["id"] = next_id()
    return out


def reset_id_counter(start: int = 0) -> None:
    """Restart id generation. Test isolation only; never call mid-session."""
    global _counter
    with _lock:
        _counter = itertools.count(start)

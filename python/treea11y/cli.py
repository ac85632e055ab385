# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import argparse
import importlib
import importlib.util
import json
import os
import sys
import warnings
from pathlib import Path

from . import ui
from .accessibility import (
    A11yViolationError,
    A11yWarning,
    activate,
    default_registry,
)
from .config import Config

CHECK_SCHEMA = "treea11y.check_result.v1"
RULES_SCHEMA = "treea11y.rules.v1"
ERROR_SCHEMA = "treea11y.error.v1"


def _load_config(args):
    if getattr(args, "config", None):
        return Config.load(Path(args.config))
    try:
        return Config.load()
    except FileNotFoundError:
        return Config.default()


def _load_entrypoint(entrypoint):
    """Resolve 'module:attr' or 'path/to/file.py:attr' to the named object."""
    if ":" not in entrypoint:
        raise ValueError(
            f"Invalid entrypoint format: {entrypoint}. Expected 'module:Component' or 'path/to/file.py:Component'"
        )
    module_path, attr_name = entrypoint.rsplit(":", 1)

    if module_path.endswith(".py") or os.path.isfile(module_path):
        spec = importlib.util.spec_from_file_location("_treea11y_check_module", module_path)
        if spec is None or spec.loader is None:
            raise ValueError(f"Could not load module from: {module_path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules["_treea11y_check_module"] = module
        spec.loader.exec_module(module)
    else:
        try:
            module = importlib.import_module(module_path)
        except ModuleNotFoundError as e:
            raise ValueError(f"Could not import module: {module_path}. Error: {e}")

    if not hasattr(module, attr_name):
        available = [n for n in dir(module) if not n.startswith("_")]
        raise ValueError(
            f"Module '{module_path}' has no attribute '{attr_name}'. Available: {', '.join(available[:10])}"
        )
    return getattr(module, attr_name)


def _audit_config(args, config):
    overrides = {}
    exclude = list(config.audit.get("exclude", [])) + list(getattr(args, "exclude", None) or [])
    if exclude:
        overrides["exclude"] = exclude
    device = getattr(args, "device", None)
    if device:
        overrides["device"] = device
    if getattr(args, "prefix", None) is not None:
        overrides["warning_prefix"] = args.prefix
    include = getattr(args, "include_src_node", None)
    if include:
        overrides["include_src_node"] = True if include == "live" else include
    return config.audit_config(**overrides)


def run_check(entrypoint, audit_config):
    """Mount the entrypoint under an audit session and collect its violations."""
    records = []
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", A11yWarning)
        session = activate(ui, audit_config)
        try:
            target = _load_entrypoint(entrypoint)
            ui.mount(target)
        except A11yViolationError as exc:
            records.append({**exc.violation.to_dict(), "text": str(exc), "source": None})
        finally:
            session.deactivate()
    for item in caught:
        if not isinstance(item.message, A11yWarning):
            continue
        warning = item.message
        source = warning.source_node
        if source is not None and not isinstance(source, str):
            source = ui.render_node(source)
        row = warning.violation.to_dict() if warning.violation is not None else {}
        row.update({"text": str(warning), "source": source})
        records.append(row)
    return {
        "schema": CHECK_SCHEMA,
        "ok": not records,
        "entrypoint": entrypoint,
        "violation_count": len(records),
        "violations": records,
    }


def cmd_check(args):
    config = _load_config(args)
    entrypoint = args.entrypoint or config.get_entrypoint()
    result = run_check(entrypoint, _audit_config(args, config))
    if getattr(args, "json", False):
        sys.stdout.write(json.dumps(result, ensure_ascii=True) + "\n")
    else:
        for row in result["violations"]:
            sys.stdout.write(f"[warn] {row['rule_id']}: {row['text']}\n")
        if result["ok"]:
            sys.stdout.write(f"[ok] {entrypoint}: no accessibility violations\n")
        else:
            sys.stdout.write(f"[error] {entrypoint}: {result['violation_count']} accessibility violation(s)\n")
    if args.strict and not result["ok"]:
        return 1
    return 0


def cmd_rules(args):
    rows = default_registry().describe()
    if getattr(args, "json", False):
        payload = {"schema": RULES_SCHEMA, "rules": rows}
        sys.stdout.write(json.dumps(payload, ensure_ascii=True) + "\n")
        return 0
    for row in rows:
        key = row["key"] or "*"
        sys.stdout.write(f"{row['id']:<36} {row['family']:<10} {key:<12} {row['message']}\n")
    return 0


def _build_parser():
    parser = argparse.ArgumentParser(prog="treea11y")
    parser.add_argument("--json", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Mount a component and report accessibility violations")
    p_check.add_argument("entrypoint", nargs="?", help="module:Component or path/to/file.py:Component")
    p_check.add_argument("--config", help="Path to treea11y.toml or pyproject.toml")
    p_check.add_argument("--exclude", action="append", help="Rule id to skip (repeatable)")
    p_check.add_argument("--device", action="append", help="Device profile (repeatable), e.g. mobile")
    p_check.add_argument("--prefix", help="Prefix prepended to every violation message")
    p_check.add_argument("--include-src-node", choices=["live", "asString"],
                         help="Attach the mounted source node to each violation")
    p_check.add_argument("--strict", action="store_true", help="Exit 1 when any violation is found")
    p_check.add_argument("--json", action="store_true", default=argparse.SUPPRESS)
    p_check.set_defaults(func=cmd_check)

    p_rules = sub.add_parser("rules", help="List registered rules")
    p_rules.add_argument("--json", action="store_true", default=argparse.SUPPRESS)
    p_rules.set_defaults(func=cmd_rules)

    from . import watcher as watcher_module

    p_watch = sub.add_parser("watch", help="Re-run check whenever a watched file changes")
    p_watch.add_argument("entrypoint", nargs="?", help="module:Component or path/to/file.py:Component")
    p_watch.add_argument("--config", help="Path to treea11y.toml or pyproject.toml")
    p_watch.add_argument("--exclude", action="append")
    p_watch.add_argument("--device", action="append")
    p_watch.add_argument("--prefix")
    p_watch.add_argument("--include-src-node", choices=["live", "asString"])
    p_watch.set_defaults(func=watcher_module.cmd_watch, strict=False)

    return parser


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args) or 0
    except Exception as exc:
        if args.json:
            err = {
                "schema": ERROR_SCHEMA,
                "ok": False,
                "code": "CLI_ERROR",
                "message": str(exc),
            }
            sys.stdout.write(json.dumps(err, ensure_ascii=True) + "\n")
        else:
            sys.stderr.write(f"[error] {exc}\n")
        return 3


if __name__ == "__main__":
    raise SystemExit(main())

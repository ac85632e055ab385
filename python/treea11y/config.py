# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import copy
from pathlib import Path
from typing import Dict, List, Optional, Any
try:
    import tomllib
except ImportError:
    import tomli as tomllib

import jsonschema

from .accessibility.options import A11yConfigurationError, AuditConfig, resolve_options

CONFIG_FILENAME = "treea11y.toml"

# Default configuration structure
DEFAULT_CONFIG = {
    "project": {
        "entrypoint": "app.py:App",
    },
    "audit": {
        "exclude": [],
        "device": [],
        "include_src_node": False,
        "warning_prefix": "",
        "throw_on_failure": False,
    },
}

AUDIT_OPTIONS_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "exclude": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "device": {
            "oneOf": [
                {"type": "string"},
                {"type": "array", "items": {"type": "string"}},
            ]
        },
        "include_src_node": {
            "oneOf": [
                {"type": "boolean"},
                {"const": "asString"},
            ]
        },
        "warning_prefix": {"type": "string"},
        "throw_on_failure": {"type": "boolean"},
    },
}


def validate_audit_options(data: Dict[str, Any]) -> None:
    try:
        jsonschema.Draft202012Validator(AUDIT_OPTIONS_SCHEMA).validate(data)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "audit"
        raise A11yConfigurationError(f"Invalid [audit] option at {where}: {e.message}")


class Config:
    def __init__(self, data: Dict[str, Any], path: Path):
        self.data = data
        self.path = path
        self.root = path.parent

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from treea11y.toml or [tool.treea11y] in pyproject.toml."""
        if path is None:
            cwd = Path.cwd()
            path = cwd / CONFIG_FILENAME
            if not path.exists() and (cwd / "pyproject.toml").exists():
                path = cwd / "pyproject.toml"
            if not path.exists():
                raise FileNotFoundError(f"No {CONFIG_FILENAME} found in {cwd}.")
        path = Path(path)

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except Exception as e:
            raise A11yConfigurationError(f"Failed to parse {path}: {e}")

        if path.name == "pyproject.toml":
            data = data.get("tool", {}).get("treea11y", {})
        config = cls(data, path)
        validate_audit_options(config.audit)
        return config

    @classmethod
    def default(cls, root: Optional[Path] = None) -> "Config":
        base = Path(root) if root is not None else Path.cwd()
        return cls(copy.deepcopy(DEFAULT_CONFIG), base / CONFIG_FILENAME)

    @property
    def project(self) -> Dict[str, Any]:
        return self.data.get("project", {})

    @property
    def audit(self) -> Dict[str, Any]:
        return self.data.get("audit", {})

    def resolve_path(self, relative_path: str) -> Path:
        return self.root / relative_path

    def get_entrypoint(self) -> str:
        return self.project.get("entrypoint", DEFAULT_CONFIG["project"]["entrypoint"])

    def get_watch_paths(self) -> List[Path]:
        paths = self.project.get("watch", [])
        if isinstance(paths, str):
            paths = [paths]
        return [self.resolve_path(p) for p in paths] or [self.root]

    def audit_config(self, **overrides: Any) -> AuditConfig:
        options = dict(self.audit)
        options.update({k: v for k, v in overrides.items() if v is not None})
        return resolve_options(options)

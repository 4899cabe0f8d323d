from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .models import SiteConfig
from .utils import DEFAULT_DATE_FORMAT

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

ENV_PREFIX = "MDSITE_"


@dataclass(frozen=True)
class BuildOptions:
    content_dir: Path = Path("pages")
    output_dir: Path = Path("public")
    cache_dir: Path = Path("html")
    per_page: int = 20
    suffix: str = ".html"
    force: bool = False
    auto_date: bool = False
    date_format: str = DEFAULT_DATE_FORMAT
    quiet: bool = False
    site: SiteConfig = field(default_factory=SiteConfig)


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        if toml is None:
            print("TOML config requires tomllib (Python 3.11+) or tomli.", file=sys.stderr)
            sys.exit(1)
        try:
            data = toml.loads(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(data, dict):
            print(f"TOML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        if yaml is None:
            print("YAML config requires PyYAML.", file=sys.stderr)
            sys.exit(1)
        try:
            data = yaml.safe_load(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be a mapping: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def parse_env_file(text: str) -> dict[str, str]:
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if key:
            values[key] = value
    return values


def load_env_file(path: Path, environ: dict | None = None) -> dict[str, str]:
    if environ is None:
        environ = os.environ
    if not path.is_file():
        return {}
    loaded = {}
    for key, value in parse_env_file(path.read_text(encoding="utf-8")).items():
        if key not in environ:
            environ[key] = value
            loaded[key] = value
    return loaded


def env_key(key: str) -> str:
    return f"{ENV_PREFIX}{key.upper()}"


def lookup(config: dict, key: str, environ: dict | None = None) -> object:
    if environ is None:
        environ = os.environ
    value = environ.get(env_key(key))
    if value is not None:
        return value
    return config.get(key)

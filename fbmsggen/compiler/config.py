"""Generator configuration (fbmsggen.toml) loading and validation."""
from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from fbmsggen.backend.constants import DEFAULT_OUTPUT, DEFAULT_PACKAGE, DEFAULT_VARIABLE
from fbmsggen.internals.errors import CatalogError
from fbmsggen.semantics.records import KIND_MSG, MACRO_KINDS

CONFIG_NAME = "fbmsggen.toml"

# Go identifier (ASCII subset)
GO_IDENT_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

GO_KEYWORDS = frozenset("""
    break case chan const continue default defer else fallthrough for func
    go goto if import interface map package range return select struct
    switch type var
""".split())


def _check_go_ident(source: str, what: str, name: str) -> None:
    if not GO_IDENT_PATTERN.match(name):
        raise ConfigError(source, f"{what} '{name}' is not a Go identifier")
    if name in GO_KEYWORDS:
        raise ConfigError(source, f"{what} '{name}' is a Go keyword")


class ConfigError(CatalogError):
    def __init__(self, path, reason: str):
        super().__init__("GE3002", path=str(path), reason=reason)
        self.reason = reason


@dataclass
class GeneratorConfig:
    inputs: List[Path] = field(default_factory=list)
    include_dirs: List[Path] = field(default_factory=list)
    output: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT))
    package: str = DEFAULT_PACKAGE
    variable: str = DEFAULT_VARIABLE
    macros: List[str] = field(default_factory=lambda: [KIND_MSG])
    facilities: Dict[str, int] = field(default_factory=dict)
    source: str = "<defaults>"

    def validate(self) -> None:
        _check_go_ident(self.source, "package", self.package)
        _check_go_ident(self.source, "variable", self.variable)
        unknown = [m for m in self.macros if m not in MACRO_KINDS]
        if unknown:
            raise ConfigError(
                self.source,
                f"unknown macro(s) {', '.join(unknown)}; expected any of {', '.join(MACRO_KINDS)}",
            )
        for name, value in self.facilities.items():
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(self.source, f"facility '{name}' must be an integer")


def load_config(path: Path) -> GeneratorConfig:
    """Load and validate a configuration file.

    Relative paths in the file are resolved against its directory.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(path, e.strerror or str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, str(e)) from e
    return _parse_config(data, Path(path).parent, str(path))


def load_config_from_string(text: str, base_dir: Optional[Path] = None,
                            source: str = "<string>") -> GeneratorConfig:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(source, str(e)) from e
    return _parse_config(data, base_dir or Path.cwd(), source)


def find_config(directory: Optional[Path] = None) -> Optional[Path]:
    """Return ./fbmsggen.toml (or the one in ``directory``) if it exists."""
    candidate = (directory or Path.cwd()) / CONFIG_NAME
    return candidate if candidate.is_file() else None


def _path_list(value, key: str, base_dir: Path, source: str) -> List[Path]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(source, f"[generator] {key} must be a list of paths")
    return [base_dir / v for v in value]


def _string(gen: dict, key: str, default: str, source: str) -> str:
    value = gen.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(source, f"[generator] {key} must be a string")
    return value


def _parse_config(data: dict, base_dir: Path, source: str) -> GeneratorConfig:
    gen = data.get("generator", {})
    facilities = data.get("facilities", {})
    if not isinstance(gen, dict):
        raise ConfigError(source, "[generator] must be a table")
    if not isinstance(facilities, dict):
        raise ConfigError(source, "[facilities] must be a table")

    macros = gen.get("macros", [KIND_MSG])
    if not isinstance(macros, list) or not all(isinstance(m, str) for m in macros):
        raise ConfigError(source, "[generator] macros must be a list of macro names")

    config = GeneratorConfig(
        inputs=_path_list(gen.get("inputs", []), "inputs", base_dir, source),
        include_dirs=_path_list(gen.get("include_dirs", []), "include_dirs", base_dir, source),
        output=base_dir / _string(gen, "output", DEFAULT_OUTPUT, source),
        package=_string(gen, "package", DEFAULT_PACKAGE, source),
        variable=_string(gen, "variable", DEFAULT_VARIABLE, source),
        macros=macros,
        facilities=dict(facilities),
        source=source,
    )
    config.validate()
    return config

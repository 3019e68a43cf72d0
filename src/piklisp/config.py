"""TOML config loading for piklisp.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "piklisp.toml"


@dataclass
class PackageConfig:
    name: str = "untitled"
    version: str = "0.0.0"


@dataclass
class CheckConfig:
    extensions: list[str] = field(default_factory=lambda: [".plisp"])
    # Empty means the project directory itself.
    fixture_dirs: list[str] = field(default_factory=list)


@dataclass
class StyleConfig:
    color: bool = True


@dataclass
class PiklispConfig:
    package: PackageConfig = field(default_factory=PackageConfig)
    check: CheckConfig = field(default_factory=CheckConfig)
    style: StyleConfig = field(default_factory=StyleConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find piklisp.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> PiklispConfig:
    """Parse a piklisp.toml file into a PiklispConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = PiklispConfig()

    if "package" in data:
        pkg = data["package"]
        config.package = PackageConfig(
            name=pkg.get("name", "untitled"),
            version=pkg.get("version", "0.0.0"),
        )

    if "check" in data:
        chk = data["check"]
        config.check = CheckConfig(
            extensions=chk.get("extensions", [".plisp"]),
            fixture_dirs=chk.get("fixture_dirs", []),
        )

    if "style" in data:
        config.style = StyleConfig(color=data["style"].get("color", True))

    return config

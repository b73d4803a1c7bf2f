"""
Version information for the TINT SDK.

Installed distribution metadata wins. A source checkout falls back to the
``pyproject.toml`` next to the package, and a broken or missing file to
``DEFAULT_VERSION``.
"""
import importlib.metadata
import pathlib

import tomli

DIST_NAME = "tint-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT = pathlib.Path(__file__).parent.parent / "pyproject.toml"


def _pyproject_version(path: pathlib.Path = PYPROJECT) -> str:
    with path.open("rb") as f:
        return tomli.load(f)["project"]["version"]


def resolve_version() -> str:
    try:
        return importlib.metadata.version(DIST_NAME)
    except importlib.metadata.PackageNotFoundError:
        pass
    try:
        return _pyproject_version()
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


__version__ = resolve_version()

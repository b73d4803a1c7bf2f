"""
Tests for the version module of the TINT SDK.
"""
import re
import importlib
from importlib import metadata as importlib_metadata
from unittest.mock import patch, mock_open

from tint_sdk import __version__


def test_version_format():
    """The version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
@patch('pathlib.Path.open', new_callable=mock_open, read_data=b'[project]\nversion = "1.2.3"\n')
def test_version_from_file(mock_open_file, mock_metadata_version):
    """When metadata lookup fails, pyproject.toml is read"""
    mock_metadata_version.side_effect = importlib_metadata.PackageNotFoundError
    import tint_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    import tint_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"


def test_version_file_not_found(monkeypatch):
    """If pyproject.toml is missing, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', lambda name: (_ for _ in ()).throw(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', lambda *args, **kwargs: (_ for _ in ()).throw(FileNotFoundError()))
    import tint_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_key_error(monkeypatch):
    """If the TOML has no version key, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', lambda name: (_ for _ in ()).throw(importlib_metadata.PackageNotFoundError()))
    m = mock_open(read_data=b'[project]\nname = "tint-sdk"\n')
    monkeypatch.setattr('pathlib.Path.open', m)
    import tint_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_malformed_pyproject_falls_back_to_default(monkeypatch):
    monkeypatch.setattr(importlib_metadata, 'version', lambda name: (_ for _ in ()).throw(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project\nversion = '))
    import tint_sdk.version as vmod
    assert vmod.resolve_version() == vmod.DEFAULT_VERSION


def test_pyproject_version_reads_given_path(tmp_path):
    from tint_sdk.version import _pyproject_version
    path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "tint-sdk"\nversion = "4.5.6"\n')
    assert _pyproject_version(path) == "4.5.6"

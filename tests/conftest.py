"""Pytest fixtures for beavernet-streets tests."""

import ast
import re
from pathlib import Path

import pytest

from beavernet_streets import StreetDataConfig, StreetLookup
from tests.functional.conftest import write_geojson


# =============================================================================
# Import enforcement: functional tests should only use the public API
# =============================================================================

# Allowed import patterns for beavernet_streets in tests/functional
# - "beavernet_streets" (the public API)
# - "beavernet_streets.cli" or "beavernet_streets.cli.commands" (CLI testing is allowed)
ALLOWED_IMPORT_PATTERNS = [
    r"^beavernet_streets$",  # Public API root
    r"^beavernet_streets\.cli(\..+)?$",  # CLI module and submodules
]


def _is_allowed_import(module_name: str) -> bool:
    """Check if a beavernet_streets import is allowed."""
    if not module_name.startswith("beavernet_streets"):
        return True  # Not a beavernet_streets import, always allowed
    return any(re.match(pattern, module_name) for pattern in ALLOWED_IMPORT_PATTERNS)


def _check_file_imports(filepath: Path) -> list[str]:
    """Check a test file for disallowed internal imports.

    Returns list of error messages for any violations found.
    """
    try:
        content = filepath.read_text()
        tree = ast.parse(content)
    except (SyntaxError, UnicodeDecodeError):
        return []  # Skip files that can't be parsed

    errors = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if not _is_allowed_import(alias.name):
                    errors.append(
                        f"{filepath}:{node.lineno}: "
                        f"Internal import not allowed: 'import {alias.name}'. "
                        f"Use 'from beavernet_streets import ...' instead."
                    )
        elif isinstance(node, ast.ImportFrom):
            if node.module and not _is_allowed_import(node.module):
                names = ", ".join(a.name for a in node.names)
                errors.append(
                    f"{filepath}:{node.lineno}: "
                    f"Internal import not allowed: 'from {node.module} import {names}'. "
                    f"Use 'from beavernet_streets import ...' instead."
                )
    return errors


def pytest_collect_file(parent, file_path):
    """Check functional test files for internal imports during collection."""
    if (
        file_path.suffix == ".py"
        and file_path.name.startswith("test_")
        and "functional" in file_path.parts
    ):
        errors = _check_file_imports(file_path)
        if errors:
            error_msg = "\n".join(errors)
            pytest.fail(
                f"\n\nInternal import violations detected:\n{error_msg}\n\n"
                "Functional tests should only import from the public API:\n"
                "  - from beavernet_streets import StreetLookup, StreetDataConfig, ...\n"
                "  - from beavernet_streets.cli.commands import cli  (for CLI tests)\n"
            )


# =============================================================================
# Sample data
# =============================================================================


def _street(oid, street, behind=None, ahead=None):
    return {
        "type": "Feature",
        "geometry": None,
        "properties": {
            "OBJECTID": oid,
            "STREET": street,
            "STREET_BACK": behind,
            "STREET_AHEAD": ahead,
            "STATUS": "Existing",
            "OWNER": "City of Niagara Falls",
        },
    }


def _intersection(oid, name, streets, coordinates=None):
    members = list(streets) + [None] * (4 - len(streets))
    return {
        "type": "Feature",
        "geometry": (
            {"type": "Point", "coordinates": list(coordinates)} if coordinates else None
        ),
        "properties": {
            "OBJECTID": oid,
            "INT_NAME": name,
            "STREET1": members[0],
            "STREET2": members[1],
            "STREET3": members[2],
            "STREET4": members[3],
            "JUNCTION": "YES",
        },
    }


@pytest.fixture
def sample_streets_geojson():
    """Street name index: four segments, one with a whitespace-only name."""
    return {
        "type": "FeatureCollection",
        "features": [
            _street(1, "Main St", behind="Fountain Ave", ahead="Park Ave"),
            _street(2, "Park Ave", behind="Main St"),
            _street(3, "  ", ahead="Victoria Ave"),  # blank primary name
            _street(4, "Ferry St", behind="", ahead="Main St"),
        ],
    }


@pytest.fixture
def sample_intersections_geojson():
    """Road intersections around Main St; the last one has no geometry."""
    return {
        "type": "FeatureCollection",
        "features": [
            _intersection(101, "Main St & Park Ave", ["Main St", "Park Ave"], (-79.09, 43.10)),
            _intersection(102, "Main St & Ferry St", ["Main St", "Ferry St"], (-79.08, 43.095)),
            _intersection(
                103,
                "Victoria Ave & Ferry St",
                ["Victoria Ave", "Ferry St", ""],
                (-79.078, 43.093),
            ),
            _intersection(104, "Main Street East & Queen St", ["Main Street East", "Queen St"]),
        ],
    }


@pytest.fixture
def dataset_files(tmp_path, sample_streets_geojson, sample_intersections_geojson):
    """Sample datasets written to a temporary data directory."""
    data_dir = tmp_path / "data"
    streets = write_geojson(data_dir / "streets.geojson", sample_streets_geojson)
    intersections = write_geojson(data_dir / "intersections.geojson", sample_intersections_geojson)
    return streets, intersections


@pytest.fixture
def local_config(dataset_files):
    """Config pointing at the sample datasets on disk."""
    streets, intersections = dataset_files
    return StreetDataConfig(streets_source=streets, intersections_source=intersections)


@pytest.fixture
async def lookup(local_config):
    """StreetLookup over the sample datasets."""
    instance = StreetLookup(config=local_config)
    yield instance
    await instance.close()

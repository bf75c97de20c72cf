"""Installed version of the simplexpr distribution."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "simplexpr"


def get_version() -> str:
    """Version recorded in the installed distribution metadata."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        # Imported from a source tree that was never installed
        return "0.0.0+unknown"

"""Version information for testmail-inbox."""

__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Release information
__title__ = "testmail-inbox"
__description__ = "pytest plugin for end-to-end email testing with testmail.app"
__author__ = "testmail-inbox contributors"
__license__ = "MIT"
__copyright__ = "Copyright 2026 testmail-inbox contributors"


def get_version() -> str:
    """Return the current version string."""
    return __version__

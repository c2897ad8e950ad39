from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "users-api"


def get_version() -> str:
    """Version of the installed users-api distribution, or "unknown"."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "unknown"

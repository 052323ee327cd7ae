"""Top-level package for the gas.zip direct deposit runner."""

from importlib import metadata


def __getattr__(name: str) -> str:
    """Expose the package version via ``gasdeposit.__version__``."""
    if name == "__version__":
        try:
            return metadata.version("gasdeposit")
        except metadata.PackageNotFoundError:
            return "0.0.0"
    raise AttributeError(name)


__all__ = ["__version__"]

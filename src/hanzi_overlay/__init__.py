"""Top-level package for the Hanzi overlay reading aid."""

from importlib import metadata


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return metadata.version("hanzi-overlay")
        except metadata.PackageNotFoundError:  # pragma: no cover - used during development
            return "0.0.0"
    raise AttributeError(name)


__all__ = ["__version__"]

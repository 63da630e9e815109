# src/ncserial/__init__.py
try:
    from .ncserial_version import __version__
except ImportError:
    try:
        from importlib.metadata import version, PackageNotFoundError
        __version__ = version("ncserial")
    except (ImportError, PackageNotFoundError):
        __version__ = "0.0.0"

from .io.serializer import NetcdfSerializer

__all__ = ["NetcdfSerializer", "__version__"]

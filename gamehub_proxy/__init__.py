"""GameHub API proxy package.

Exposes the installed distribution version as ``__version__``; the ASGI app
itself lives in :mod:`gamehub_proxy.main`.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gamehub-proxy")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

"""docksync CLI: mirror a host directory into a running container."""

from ._sync import main, serve_forever  # noqa: F401 (entry point)

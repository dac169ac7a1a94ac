"""Length-prefixed TCP messaging: a wire protocol, a client and a server."""

__version__ = "0.1.0"
__all__ = ["protocol", "client", "server"]
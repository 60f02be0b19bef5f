"""MongoDB wire protocol messages and helpers for working with them."""

__version__ = "0.1.0"
"""Context-driven serialization with per-type providers, JSON reading and writing, and arenas."""

__version__ = "0.1.0"

__all__ = ["arena", "basic", "components", "extra", "json_codec", "records"]
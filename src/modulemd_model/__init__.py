"""
modulemd-model - Module stream metadata model.

Parses, validates, edits, upgrades and canonically re-emits the YAML
documents that describe software modules and their streams.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for the public entry points."""
    if name == "ModuleStream":
        from modulemd_model.models.stream import ModuleStream

        return ModuleStream
    if name == "ModuleIndex":
        from modulemd_model.core.index import ModuleIndex

        return ModuleIndex
    if name in ("read_string", "read_stream", "Strictness"):
        from modulemd_model.core import reader

        return getattr(reader, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ModuleStream", "ModuleIndex", "Strictness", "read_string", "read_stream", "__version__"]

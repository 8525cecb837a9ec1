"""Configuration source and runtime capability adapters."""

from .runtime import EnvironmentConfigSource, PythonRuntimeCapabilities

__all__ = ["EnvironmentConfigSource", "PythonRuntimeCapabilities"]

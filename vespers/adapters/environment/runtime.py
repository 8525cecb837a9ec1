"""Environment adapters.

Implements ConfigSourcePort over process environment variables and
RuntimeCapabilitiesPort over importable standard library modules.
"""

import importlib.util
import logging
import os
from collections.abc import Mapping

from vespers.core.ports import ConfigSourcePort, RuntimeCapabilitiesPort

logger = logging.getLogger(__name__)


class EnvironmentConfigSource(ConfigSourcePort):
    """Reads configuration values from the environment.

    Values missing from the environment fall back to ``defaults``, which
    lets settings loaded from a .env file count as present.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        defaults: Mapping[str, str] | None = None,
    ):
        self.environ = environ if environ is not None else os.environ
        self.defaults = dict(defaults or {})

    def get(self, name: str) -> str | None:
        for source in (self.environ, self.defaults):
            value = source.get(name)
            if value and value.strip():
                return value
        return None


class PythonRuntimeCapabilities(RuntimeCapabilitiesPort):
    """Reports a capability as present when its module can be imported.

    Capability names are module names unless mapped otherwise, e.g.
    {"tls": "ssl"}.
    """

    def __init__(self, aliases: Mapping[str, str] | None = None):
        self.aliases = dict(aliases or {})

    def has_capability(self, name: str) -> bool:
        module = self.aliases.get(name, name)
        try:
            found = importlib.util.find_spec(module) is not None
        except (ImportError, ValueError):
            found = False
        if not found:
            logger.debug(f"Runtime capability {name} ({module}) not available")
        return found

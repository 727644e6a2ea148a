"""Plugin system for sast-bench.

Uses Pluggy for plugin discovery and hook management. Bundled renderers
are registered on initialization; external plugins are discovered through
the ``sast_bench`` entry point group.

    from sast_bench.plugins import initialize_plugins, reset_plugins, get_plugins
"""

import contextlib
import importlib

import pluggy

from sast_bench.logging import get_logger
from sast_bench.plugins.hookspecs import RendererSpec

logger = get_logger(__name__)


# Default plugins bundled with sast-bench
DEFAULT_PLUGINS = (
    "sast_bench.renderers.summary_json",
    "sast_bench.renderers.summary_csv",
    "sast_bench.renderers.summary_toml",
    "sast_bench.renderers.matches_csv",
)


pm = pluggy.PluginManager("sast_bench")
pm.add_hookspecs(RendererSpec)

_initialized: bool = False


def _load_default_plugins() -> None:
    """Load plugins bundled with sast-bench."""
    for plugin_path in DEFAULT_PLUGINS:
        try:
            module = importlib.import_module(plugin_path)
            pm.register(module, name=plugin_path)
            logger.debug(f"Loaded plugin: {plugin_path}")
        except ImportError as e:
            logger.warning(f"Could not load plugin {plugin_path}: {e}")


def _load_external_plugins() -> None:
    """Discover and load external plugins via entry points."""
    try:
        num_loaded = pm.load_setuptools_entrypoints("sast_bench")
        if num_loaded > 0:
            logger.debug(f"Loaded {num_loaded} external plugin(s)")
    except Exception as e:
        logger.warning(f"Error loading external plugins: {e}")


def initialize_plugins() -> None:
    """Initialize the plugin system.

    Idempotent: calls after the first have no effect until reset_plugins().
    """
    global _initialized

    if _initialized:
        return

    _load_default_plugins()
    _load_external_plugins()
    _initialized = True

    logger.debug(f"Plugin system initialized with {len(pm.get_plugins())} plugin(s)")


def reset_plugins() -> None:
    """Unregister every plugin (mainly for testing)."""
    global _initialized

    for plugin in list(pm.get_plugins()):
        with contextlib.suppress(ValueError):
            pm.unregister(plugin)

    _initialized = False


def get_plugins() -> list[dict]:
    """Get information about loaded plugins.

    Returns:
        List of plugin info dictionaries with name and module.
    """
    if not _initialized:
        initialize_plugins()

    return [
        {"name": pm.get_name(plugin), "module": getattr(plugin, "__name__", str(plugin))}
        for plugin in pm.get_plugins()
    ]


__all__ = [
    "pm",
    "DEFAULT_PLUGINS",
    "initialize_plugins",
    "reset_plugins",
    "get_plugins",
]

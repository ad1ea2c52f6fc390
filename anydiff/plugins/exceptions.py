"""Plugin subsystem exceptions."""

from anydiff.core.exceptions import DiffError


class PluginError(DiffError):
    """Base class for plugin errors."""


class PluginConfigError(PluginError, ValueError):
    """Plugin config file is malformed or has an unsupported version."""


class PluginLoadError(PluginError):
    """A plugin entrypoint could not be imported, built or validated."""

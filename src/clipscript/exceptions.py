"""Exception hierarchy for clipscript."""


class ClipScriptError(Exception):
    """Base class for clipscript errors."""


class MarshalError(ClipScriptError):
    """A script value could not be converted into an item record."""


class ConfigError(ClipScriptError):
    """Configuration loading or validation error."""

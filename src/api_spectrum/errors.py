"""Exception types raised by api-spectrum."""


class SpectrumError(Exception):
    """Base error for everything the generator raises on purpose."""


class AnalysisError(SpectrumError):
    """An analysis collaborator could not describe a controller, form request or resource."""


class ConfigError(SpectrumError):
    """A configuration file could not be read or is not a mapping."""

"""
Error types raised by the agenda pipeline
"""


class AgendaError(Exception):
    """Base class for fatal agenda errors"""


class ConfigError(AgendaError, ValueError):
    """Invalid command line configuration"""


class FetchError(AgendaError):
    """Calendar feed could not be retrieved"""


class ParseError(AgendaError):
    """Calendar feed could not be parsed"""

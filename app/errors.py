class OmdbError(Exception):
    """Base exception for OMDb client errors"""
    pass


class ConfigParseError(OmdbError):
    """Client configuration is not valid JSON of the expected shape"""
    pass


class QueryValidationError(OmdbError, ValueError):
    """A request is missing a required parameter"""
    pass


class TransportError(OmdbError):
    """Connection-related errors"""
    pass


class DecodeError(OmdbError):
    """Response body is not valid JSON or has an unexpected shape"""
    pass

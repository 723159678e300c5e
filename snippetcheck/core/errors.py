"""Exception hierarchy for the snippet checker."""


class SnippetCheckError(Exception):
    """Base exception for snippet checker errors."""
    pass


class ContentRootError(SnippetCheckError):
    """Raised when the content root cannot be listed."""
    pass


class ConfigurationError(SnippetCheckError):
    """Raised when a configuration file is missing or malformed."""
    pass


class SnippetParseError(SnippetCheckError):
    """Raised when a snippet cannot be parsed or traversed."""
    pass

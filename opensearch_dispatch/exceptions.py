"""Exceptions raised by the dispatch layer.

Server-side failures are never raised from here; they come back as invalid
responses. These types cover local mistakes only.
"""


class OpenSearchDispatchError(Exception):
    """Base class for errors raised by opensearch_dispatch."""


class ConfigurationError(OpenSearchDispatchError, ValueError):
    """The client configuration is missing or malformed."""


class InvalidRequestError(OpenSearchDispatchError, ValueError):
    """A request could not be built or is missing a required field."""

# src/services/errors.py

"""Errors raised while fetching remote catalog data."""


class FetchError(Exception):
    """Base class for catalog and image fetch failures.

    ``str(error)`` is a message suitable for showing to the user.
    """


class InvalidEndpoint(FetchError):
    """The configured URL is not a usable http(s) address."""


class TransportError(FetchError):
    """The request failed on the network or returned a non-200 status."""


class DecodeError(FetchError):
    """The response body does not have the expected JSON shape."""


class EmptyResponse(FetchError):
    """The server answered without a body."""

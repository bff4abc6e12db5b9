"""Video source error taxonomy."""

from __future__ import annotations


class VideoSourceError(Exception):
    """Base class for all video source errors.

    ``retryable`` tells the caller whether repeating the whole resolve
    operation can succeed without changing anything but its own state
    (e.g. after supplying a credential).
    """

    retryable: bool = False


class TransportFailureError(VideoSourceError):
    """The network layer could not complete the request."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"transport failure for {url}: {reason}")
        self.url = url
        self.reason = reason


class InvalidUrlError(VideoSourceError):
    """No registered source recognizes the URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"unsupported url: {url}")
        self.url = url


class NeedsAuthenticationError(VideoSourceError):
    """A credential is required but none is set on the source."""

    retryable = True

    def __init__(self, source: str, url: str | None = None) -> None:
        target = f" ({url})" if url else ""
        super().__init__(f"{source} requires a login token{target}")
        self.source = source
        self.url = url


class RemoteRequestError(VideoSourceError):
    """The remote API (or transport status) reported a generic failure."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.code = code


class NoSuchResourceError(VideoSourceError):
    """The requested resource, field, or stream candidate does not exist."""

    def __init__(self, context: str) -> None:
        super().__init__(f"no such resource: {context}")
        self.context = context

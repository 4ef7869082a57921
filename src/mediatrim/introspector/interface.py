"""Errors raised by the host adapters."""


class MediaIntrospectionError(Exception):
    """Raised when the source file cannot be probed."""

    pass


class HostStateError(Exception):
    """Raised when a host state snapshot is malformed."""

    pass

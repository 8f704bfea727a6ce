"""Project-level exception hierarchy."""


class SessionTicketError(Exception):
    """Base for all session-tickets exceptions."""


class ConfigError(SessionTicketError):
    """Configuration file could not be read or validated."""


class StoreError(SessionTicketError):
    """Session persistence failed."""


class SessionNotFoundError(StoreError):
    """No stored record exists for the token."""


class CorruptSessionError(StoreError):
    """Stored record exists but cannot be deserialized."""


class StoreTimeoutError(StoreError):
    """Store operation exceeded the configured deadline."""

"""Shared constants used across the package."""

import enum

# Fractional digits kept for stored and stamped instants (milliseconds)
INSTANT_PRECISION = 3


class InvalidationScope(enum.StrEnum):
    """Granularity at which tokens are invalidated."""

    TOKEN = "token"
    USER = "user"
    CLIENT = "client"
    USER_CLIENT = "user-client"

"""Exceptions raised by the fee engine.

All errors are input-validation failures raised before any computation
starts. They subclass ``ValueError`` so callers that already guard
configuration code with ``except ValueError`` keep working.
"""


class PegFeeError(ValueError):
    """Base class for pegfee errors."""


class InvalidPrice(PegFeeError):
    """A supplied price is not a strictly positive, representable value."""


class InvalidParameters(PegFeeError):
    """A fee parameter set violates its ordering or range invariants."""

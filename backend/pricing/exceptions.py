class PricingError(Exception):
    """Base exception for gap-night pricing errors"""
    pass


class NotFoundError(PricingError):
    """Property or one of the requested nights has no availability record."""
    pass


class InvalidRangeError(PricingError):
    """Zero-length, reversed or already unavailable date range."""
    pass

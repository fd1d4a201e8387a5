"""
Error types shared by the overlay components.
"""


class InvalidInputError(ValueError):
    """Structural input is missing or malformed; the whole call fails."""

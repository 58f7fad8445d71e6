"""
Country Cache database models.
"""

from .base import Base
from .country import Country, normalize_name

__all__ = [
    "Base",
    "Country",
    "normalize_name",
]

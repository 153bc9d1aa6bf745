"""
InfoShare - write-once info records with attribute-filtered queries.
"""

from .core.config import VERSION

__version__ = VERSION

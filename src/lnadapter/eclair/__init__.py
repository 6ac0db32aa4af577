"""
Eclair Adapter.

Maps the Eclair REST API, across its releases, onto the canonical node interface.
"""

from lnadapter.eclair.service import EclairService

__all__ = [
    "EclairService",
]

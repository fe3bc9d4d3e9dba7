"""
Protocol encoders for the Pharos LP adapter
"""

from .router import RouterEncoder, encode_approve

__all__ = [
    "RouterEncoder",
    "encode_approve",
]

"""
Decoding strategies sharing the :class:`Decoder` interface.
"""

from .base import Decoder, DecodingResult
from .erasure import ErasureDecoder, ErasureResult

__all__ = ["Decoder", "DecodingResult", "ErasureDecoder", "ErasureResult"]

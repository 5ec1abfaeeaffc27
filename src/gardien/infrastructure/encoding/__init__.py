"""
Byte encodings.
"""

from gardien.infrastructure.encoding.base58_encoding import Base58Encoding
from gardien.infrastructure.encoding.base64_encoding import Base64Encoding

__all__ = ["Base58Encoding", "Base64Encoding"]

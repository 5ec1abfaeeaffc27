"""
Gardien - wallet sign-in service.

Challenge-response authentication for Solana keypairs.
"""

__version__ = "0.1.0"

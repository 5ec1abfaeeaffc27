"""
Wallet collaborators.
"""

from gardien.infrastructure.wallet.keypair_wallet import KeypairWallet

__all__ = ["KeypairWallet"]

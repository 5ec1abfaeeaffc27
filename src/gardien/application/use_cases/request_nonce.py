"""
Request Nonce use case.
"""

from gardien.application.auth_session import AuthComponents, AuthSession
from gardien.domain.value_objects.challenge import Challenge


class RequestNonce:
    """
    Issue a sign-in challenge for an identity.

    Business rules:
    - Identity must be a canonical base58 Ed25519 public key
    - Unknown identities are registered in the user directory
    - Any previous nonce for the identity is superseded
    """

    def __init__(self, components: AuthComponents):
        """
        Initialize use case with dependencies.

        Args:
            components: Shared sign-in collaborators
        """
        self.components = components

    async def execute(self, identity: str) -> Challenge:
        """
        Execute nonce request.

        Args:
            identity: Base58 public key of the requester

        Returns:
            Challenge with nonce and static message fields

        Raises:
            InvalidIdentityError: If identity is malformed
            StorageUnavailableError: If the directory cannot be reached
        """
        session = AuthSession(self.components)
        return await session.request(identity)

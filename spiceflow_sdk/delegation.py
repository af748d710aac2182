"""
EIP-7702 delegation authorizations for one or more chains.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from .chain import ChainClient
from .exceptions import ConfigError, EncodingError, SigningError
from .models import Authorization
from .signer import Signer
from .utils import to_address, to_uint256

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DelegationRequest:
    """
    One delegation to sign.

    Attributes:
        chain_id: Chain the authorization is valid on
        contract_address: Delegate contract the account will run as
        nonce: Explicit account nonce, or None to load it from the chain
    """
    chain_id: int
    contract_address: str
    nonce: Optional[int] = None


class DelegationBuilder:
    """
    Produces signed EIP-7702 authorizations.

    Nonces are resolved before any signing happens. Requests without an explicit
    nonce get the account's pending nonce on their chain; further such requests
    on the same chain get the next nonce up, since each authorization consumes
    one nonce slot. Once every nonce is fixed the signatures are independent and
    are produced concurrently, returned in request order.
    """

    def __init__(
        self,
        signer: Signer,
        chain_client: Optional[ChainClient] = None,
        max_workers: int = 4,
        logger: Optional[logging.Logger] = None
    ):
        if signer is None:
            raise SigningError("A signer is required to build delegations")
        self.signer = signer
        self.chain_client = chain_client
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger(__name__)

    def build(self, chain_id: int, delegate_address: str, nonce: Optional[int] = None, user: Optional[str] = None) -> Authorization:
        """
        Sign a single delegation.

        Raises:
            NonceLookupError: If the nonce must be loaded and the lookup fails
            SigningError: If the signer fails
        """
        if nonce is None:
            nonce = self._lookup_nonce(user or self.signer.address, chain_id)
        return self._sign(DelegationRequest(chain_id, delegate_address, to_uint256(nonce, "nonce")))

    def sign_delegations(self, delegations: Sequence[DelegationRequest], user: Optional[str] = None) -> List[Authorization]:
        """
        Sign delegations for several chains.

        Args:
            delegations: Requests in the order the authorizations should be returned
            user: Account whose nonce is loaded (defaults to the signer address)

        Returns:
            One Authorization per request, in request order
        """
        resolved = self._resolve_nonces(delegations, user or self.signer.address)
        if len(resolved) <= 1 or self.max_workers <= 1:
            return [self._sign(request) for request in resolved]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(resolved))) as pool:
            return list(pool.map(self._sign, resolved))

    def _resolve_nonces(self, delegations: Sequence[DelegationRequest], user: str) -> List[DelegationRequest]:
        next_nonce: Dict[int, int] = {}
        resolved = []
        for request in delegations:
            if request.nonce is not None:
                resolved.append(DelegationRequest(request.chain_id, request.contract_address, to_uint256(request.nonce, "nonce")))
                continue
            if request.chain_id not in next_nonce:
                next_nonce[request.chain_id] = self._lookup_nonce(user, request.chain_id)
            nonce = next_nonce[request.chain_id]
            next_nonce[request.chain_id] = nonce + 1
            resolved.append(DelegationRequest(request.chain_id, request.contract_address, nonce))
        return resolved

    def _lookup_nonce(self, user: str, chain_id: int) -> int:
        if self.chain_client is None:
            raise ConfigError("A chain client is required to load account nonces; pass explicit nonces instead")
        # NonceLookupError propagates unchanged
        return self.chain_client.get_account_nonce(user, chain_id)

    def _sign(self, request: DelegationRequest) -> Authorization:
        delegate = to_address(request.contract_address, "contract_address")
        try:
            authorization = self.signer.sign_delegation(delegate, request.chain_id, request.nonce)
        except SigningError:
            raise
        except Exception as e:
            self.logger.error(f"Delegation signing failed on chain {request.chain_id}: {e}")
            raise SigningError(f"Failed to sign delegation: {str(e)}") from e

        if not isinstance(authorization, Authorization):
            try:
                authorization = Authorization.model_validate(authorization)
            except (ValidationError, EncodingError) as e:
                raise SigningError(f"Signer returned a malformed authorization: {str(e)}") from e
        self.logger.debug(f"Delegation signed: chain={request.chain_id} nonce={request.nonce} delegate={delegate}")
        return authorization

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

# Status tags (stable: persisted in the record encoding)
CREATED = "Created"
DOING = "Doing"
ERROR = "Error"
DONE = "Done"


@dataclass(frozen=True)
class Created:
    kind: ClassVar[str] = CREATED


@dataclass(frozen=True)
class Doing:
    """An operator has recorded the destination-chain transaction hash."""
    to_txn_hash: str
    kind: ClassVar[str] = DOING


@dataclass(frozen=True)
class Error:
    """Processing failed. Keeps the hash recorded while Doing."""
    to_txn_hash: str
    error: str
    kind: ClassVar[str] = ERROR


@dataclass(frozen=True)
class Done:
    to_txn_hash: str
    kind: ClassVar[str] = DONE


RequestStatus = Union[Created, Doing, Error, Done]


@dataclass(frozen=True)
class BridgeRequest:
    # Destination side (opaque to the lifecycle)
    to_blockchain: str
    to_token: str
    to_address: str

    # Funding side. A token address marks the token-funded path.
    from_token_address: Optional[str]
    from_amount_atom: str

    status: RequestStatus

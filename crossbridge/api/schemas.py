from typing import Literal, Optional
from pydantic import BaseModel

StatusKind = Literal["Created", "Doing", "Error", "Done"]


class InitRequest(BaseModel):
    operator_id: str


class CreateBridgeRequest(BaseModel):
    to_blockchain: str
    to_token: str
    to_address: str
    # Token-funded transfers are rejected with 501 until implemented.
    from_token_address: Optional[str] = None


class MarkDoingRequest(BaseModel):
    to_txn_hash: str


class MarkErrorRequest(BaseModel):
    error: str


class StatusOut(BaseModel):
    kind: StatusKind
    to_txn_hash: Optional[str] = None
    error: Optional[str] = None


class BridgeRequestOut(BaseModel):
    to_blockchain: str
    to_token: str
    to_address: str
    from_token_address: Optional[str] = None
    from_amount_atom: str
    status: StatusOut


class QueryResponse(BaseModel):
    requester: str
    request: Optional[BridgeRequestOut] = None


class AckResponse(BaseModel):
    status: Literal["success"] = "success"

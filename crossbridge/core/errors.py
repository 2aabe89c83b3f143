from __future__ import annotations


class BridgeError(Exception):
    """Base for every rejection the lifecycle can produce.

    `kind` is the stable machine-readable name surfaced to callers; `http_status`
    is what the transport answers with.
    """

    kind = "BridgeError"
    http_status = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class AlreadyInitialized(BridgeError):
    kind = "AlreadyInitialized"
    http_status = 409

    def __init__(self, message: str = "Already initialized") -> None:
        super().__init__(message)


class NotInitialized(BridgeError):
    kind = "NotInitialized"
    http_status = 503

    def __init__(self, message: str = "Bridge should be initialized before usage") -> None:
        super().__init__(message)


class InvalidOwner(BridgeError):
    kind = "InvalidOwner"
    http_status = 400

    def __init__(self, owner_id: str) -> None:
        super().__init__(f"Owner's account ID is invalid: {owner_id!r}")
        self.owner_id = owner_id


class NotOwner(BridgeError):
    kind = "NotOwner"
    http_status = 403

    def __init__(self, message: str = "only allowed by owner") -> None:
        super().__init__(message)


class RequestNotFound(BridgeError):
    kind = "RequestNotFound"
    http_status = 404

    def __init__(self, requester_id: str) -> None:
        super().__init__(f"expect request exist for {requester_id}")
        self.requester_id = requester_id


class InvalidTransition(BridgeError):
    kind = "InvalidTransition"
    http_status = 409

    def __init__(self, *, expected: str, actual: str) -> None:
        super().__init__(f"expect request to be {expected}, found {actual}")
        self.expected = expected
        self.actual = actual


class UnfinishedRequestExists(BridgeError):
    kind = "UnfinishedRequestExists"
    http_status = 409

    def __init__(self, requester_id: str, status: str) -> None:
        super().__init__(f"unfinished request for {requester_id} (status {status})")
        self.requester_id = requester_id
        self.status = status


class TokenTransferNotImplemented(BridgeError):
    kind = "NotImplemented"
    http_status = 501

    def __init__(self, from_token_address: str) -> None:
        super().__init__(f"token-funded transfers are not implemented (token {from_token_address})")
        self.from_token_address = from_token_address

r"""
Request lifecycle transitions.

    (no record) --create--> Created --mark_doing--> Doing --mark_done--> Done
                                                       \--mark_error--> Error

Done and Error are terminal; the only way out is a brand-new request that
overwrites the requester's slot.

Every function dispatches on all four status types. An object that is none of
them is a programming error and raises TypeError instead of being accepted.
"""
from crossbridge.core.errors import InvalidTransition
from crossbridge.store.models import (
    CREATED,
    DOING,
    Created,
    Doing,
    Done,
    Error,
    RequestStatus,
)


def _unknown(status) -> TypeError:
    return TypeError(f"unknown request status: {status!r}")


def status_tag(status: RequestStatus) -> str:
    if isinstance(status, (Created, Doing, Error, Done)):
        return status.kind
    raise _unknown(status)


def is_terminal(status: RequestStatus) -> bool:
    if isinstance(status, (Error, Done)):
        return True
    if isinstance(status, (Created, Doing)):
        return False
    raise _unknown(status)


def start_doing(status: RequestStatus, to_txn_hash: str) -> Doing:
    """Created -> Doing."""
    if isinstance(status, Created):
        return Doing(to_txn_hash=to_txn_hash)
    if isinstance(status, (Doing, Error, Done)):
        raise InvalidTransition(expected=CREATED, actual=status.kind)
    raise _unknown(status)


def finish_done(status: RequestStatus) -> Done:
    """Doing -> Done, carrying the hash over unchanged."""
    if isinstance(status, Doing):
        return Done(to_txn_hash=status.to_txn_hash)
    if isinstance(status, (Created, Error, Done)):
        raise InvalidTransition(expected=DOING, actual=status.kind)
    raise _unknown(status)


def finish_error(status: RequestStatus, error: str) -> Error:
    """Doing -> Error, carrying the hash over unchanged."""
    if isinstance(status, Doing):
        return Error(to_txn_hash=status.to_txn_hash, error=error)
    if isinstance(status, (Created, Error, Done)):
        raise InvalidTransition(expected=DOING, actual=status.kind)
    raise _unknown(status)

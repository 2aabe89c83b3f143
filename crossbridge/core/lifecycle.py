"""
Bridge request lifecycle controller.

Holds the fixed operator identity, the request store and a per-key lock
provider. Caller identity and attached value are explicit arguments: the
transport (HTTP routes, scripts, tests) authenticates callers and passes them in.

Every mutating operation runs load -> check -> write under the requester's
lock, and every rejection is raised before the write.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional

from crossbridge.core.errors import (
    AlreadyInitialized,
    BridgeError,
    InvalidOwner,
    NotInitialized,
    NotOwner,
    RequestNotFound,
    TokenTransferNotImplemented,
    UnfinishedRequestExists,
)
from crossbridge.core.identity import is_valid_account_id
from crossbridge.core.state_machine import (
    finish_done,
    finish_error,
    is_terminal,
    start_doing,
    status_tag,
)
from crossbridge.observability.logging import log
from crossbridge.store.models import BridgeRequest, Created
from crossbridge.utils.lock import LocalKeyLocks


def _lock_key(requester_id: str) -> str:
    return f"requester:{requester_id}"


class BridgeLifecycle:
    def __init__(self, store, operator_id: str, locks=None) -> None:
        self._store = store
        self._operator_id = operator_id
        self._locks = locks if locks is not None else LocalKeyLocks()

    @property
    def operator_id(self) -> str:
        return self._operator_id

    @classmethod
    def construct(cls, store, operator_id: str, locks=None) -> "BridgeLifecycle":
        """One-time setup: fix the operator for the lifetime of this store."""
        if not is_valid_account_id(operator_id):
            raise InvalidOwner(operator_id)
        if store.get_operator() is not None or not store.init_operator(operator_id):
            raise AlreadyInitialized()
        log(event="bridge_constructed", operator=operator_id)
        return cls(store, operator_id, locks=locks)

    @classmethod
    def load(cls, store, locks=None) -> "BridgeLifecycle":
        operator_id = store.get_operator()
        if operator_id is None:
            raise NotInitialized()
        return cls(store, operator_id, locks=locks)

    # ------------------------------------------------------------------
    # Requester side
    # ------------------------------------------------------------------
    def create_request(
        self,
        caller: str,
        to_blockchain: str,
        to_token: str,
        to_address: str,
        from_token_address: Optional[str] = None,
        attached_value: int = 0,
    ) -> None:
        """
        Open a new request for `caller`.

        Only the native-value path exists: `from_amount_atom` is the attached
        value in smallest units. A previous request must be Done or Error.
        """
        if from_token_address is not None:
            self._reject_create(caller, TokenTransferNotImplemented(from_token_address), attached_value)
        if isinstance(attached_value, bool) or not isinstance(attached_value, int) or attached_value < 0:
            raise ValueError(f"attached_value must be a non-negative integer, got {attached_value!r}")

        request = BridgeRequest(
            to_blockchain=to_blockchain,
            to_token=to_token,
            to_address=to_address,
            from_token_address=None,
            from_amount_atom=str(attached_value),
            status=Created(),
        )

        with self._locks(_lock_key(caller)):
            existing = self._store.get(caller)
            if existing is not None and not is_terminal(existing.status):
                self._reject_create(
                    caller,
                    UnfinishedRequestExists(caller, status_tag(existing.status)),
                    attached_value,
                )
            self._store.put(caller, request)

        log(
            event="request_created",
            requester=caller,
            to_blockchain=to_blockchain,
            to_token=to_token,
            to_address=to_address,
            from_amount_atom=request.from_amount_atom,
            superseded=status_tag(existing.status) if existing is not None else None,
        )

    def _reject_create(self, caller: str, err: BridgeError, attached_value) -> None:
        # Nothing is recorded on rejection; the attached value stays with the host.
        log(
            event="request_create_rejected",
            requester=caller,
            kind=err.kind,
            attached_value=str(attached_value),
        )
        raise err

    # ------------------------------------------------------------------
    # Operator side
    # ------------------------------------------------------------------
    def _require_operator(self, caller: str, op: str) -> None:
        # Checked before any lookup so non-operators learn nothing about records.
        if caller != self._operator_id:
            log(event="request_transition_rejected", op=op, caller=caller, kind=NotOwner.kind)
            raise NotOwner()

    def _transition(self, caller: str, requester_id: str, op: str, advance) -> BridgeRequest:
        self._require_operator(caller, op)
        with self._locks(_lock_key(requester_id)):
            existing = self._store.get(requester_id)
            if existing is None:
                log(event="request_transition_rejected", op=op, requester=requester_id, kind=RequestNotFound.kind)
                raise RequestNotFound(requester_id)
            try:
                new_status = advance(existing.status)
            except BridgeError as e:
                log(event="request_transition_rejected", op=op, requester=requester_id, kind=e.kind,
                    current=status_tag(existing.status))
                raise
            updated = replace(existing, status=new_status)
            self._store.put(requester_id, updated)
        return updated

    def mark_doing(self, caller: str, requester_id: str, to_txn_hash: str) -> None:
        self._transition(caller, requester_id, "mark_doing", lambda s: start_doing(s, to_txn_hash))
        log(event="request_doing", requester=requester_id, to_txn_hash=to_txn_hash)

    def mark_done(self, caller: str, requester_id: str) -> None:
        updated = self._transition(caller, requester_id, "mark_done", finish_done)
        log(event="request_done", requester=requester_id, to_txn_hash=updated.status.to_txn_hash)

    def mark_error(self, caller: str, requester_id: str, error_message: str) -> None:
        updated = self._transition(caller, requester_id, "mark_error", lambda s: finish_error(s, error_message))
        log(event="request_error", requester=requester_id, to_txn_hash=updated.status.to_txn_hash,
            error=error_message)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    def query(self, requester_id: str) -> Optional[BridgeRequest]:
        """Current record for `requester_id`, or None. Open to any caller."""
        return self._store.get(requester_id)

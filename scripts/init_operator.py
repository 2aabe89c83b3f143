#!/usr/bin/env python3
"""
Construct the bridge against Redis: fixes the operator identity once.
Safe to re-run; a second run reports AlreadyInitialized and exits non-zero.

    OPERATOR_ID=relayer.bridge python scripts/init_operator.py
"""
import os
import sys

from crossbridge.core.errors import BridgeError
from crossbridge.core.lifecycle import BridgeLifecycle
from crossbridge.settings import settings
from crossbridge.store.request_repo import RedisRequestStore


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    operator_id = argv[0] if argv else os.getenv("OPERATOR_ID", "")
    if not operator_id:
        print("usage: init_operator.py <operator_id>  (or set OPERATOR_ID)")
        return 2
    try:
        BridgeLifecycle.construct(RedisRequestStore(), operator_id)
    except BridgeError as e:
        print(f"{e.kind}: {e.message}")
        return 1
    print(f"OK: operator {operator_id} fixed in {settings.REDIS_URL}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

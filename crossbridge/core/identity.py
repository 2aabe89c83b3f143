import re

MIN_ACCOUNT_ID_LEN = 2
MAX_ACCOUNT_ID_LEN = 64

# Lowercase alphanumeric parts joined by single '-' or '_', optionally
# dotted into sub-accounts ("relayer.bridge", "ops-team_1.near").
_ACCOUNT_ID_RE = re.compile(r"(([a-z\d]+[-_])*[a-z\d]+\.)*([a-z\d]+[-_])*[a-z\d]+")


def is_valid_account_id(account_id) -> bool:
    if not isinstance(account_id, str):
        return False
    if not (MIN_ACCOUNT_ID_LEN <= len(account_id) <= MAX_ACCOUNT_ID_LEN):
        return False
    return _ACCOUNT_ID_RE.fullmatch(account_id) is not None

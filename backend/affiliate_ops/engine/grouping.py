"""Account grouping: which records belong to which account / user."""
from typing import Dict, Iterable, List

from affiliate_ops.engine.types import Account, SalesRecord


def records_for_accounts(records: Iterable[SalesRecord], account_ids: Iterable[str]) -> List[SalesRecord]:
    managed = set(account_ids)
    if not managed:
        return []
    return [r for r in records if r.account_id in managed]


def group_by_account(records: Iterable[SalesRecord]) -> Dict[str, List[SalesRecord]]:
    groups: Dict[str, List[SalesRecord]] = {}
    for record in records:
        groups.setdefault(record.account_id, []).append(record)
    return groups


def count_managed_accounts(accounts: Iterable[Account], managed_account_ids: Iterable[str]) -> int:
    """Number of known accounts a user manages; ids with no matching account are ignored."""
    managed = set(managed_account_ids)
    return sum(1 for account in accounts if account.id in managed)

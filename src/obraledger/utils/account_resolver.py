"""Utility for resolving account names to codes."""

from obraledger.domain.chart import ChartOfAccounts


def resolve_account(chart: ChartOfAccounts, account: str) -> str:
    """Resolve an account code or name to its code.

    Codes are accepted as-is, even when missing from the chart, so entries
    can still be posted to accounts defined elsewhere. Names are matched
    case-insensitively against the chart.

    Raises:
        ValueError: If a name matches no account, or more than one
    """
    account = account.strip()
    if account.isdigit():
        return account

    wanted = account.casefold()
    matches = [code for code, name in chart.items() if name.casefold() == wanted]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise ValueError(f"Account name '{account}' is ambiguous: {', '.join(matches)}")
    raise ValueError(f"Account '{account}' not found in the chart of accounts")

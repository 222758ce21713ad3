"""Input checks applied before commands reach the ledger.

The ledger itself assumes commands are pre-validated; these helpers are for
input boundaries such as the CLI.
"""

from expensa.domain.models import BILLING_CYCLES, FREQUENCIES, PERIODS, LedgerState, Money


def validate_expense_input(
    amount: Money,
    description: str,
    category: str,
    state: LedgerState | None = None,
) -> tuple[bool, str | None]:
    """Validate user input for a new or edited expense.

    Args:
        amount: Entered amount.
        description: Entered description.
        category: Entered category id.
        state: Optional snapshot used to check the category exists.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not amount.is_finite() or amount <= 0:
        return False, "Amount must be positive"

    if not description.strip():
        return False, "Description is required"

    if not category:
        return False, "Category is required"

    if state is not None and not any(c.id == category for c in state.categories):
        return False, f"Unknown category: {category}"

    return True, None


def validate_budget_input(amount: Money, period: str) -> tuple[bool, str | None]:
    """Validate a budget cap and period.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not amount.is_finite() or amount <= 0:
        return False, "Amount must be positive"

    if period not in PERIODS:
        return False, f"Period must be one of: {', '.join(PERIODS)}"

    return True, None


def validate_frequency(frequency: str) -> tuple[bool, str | None]:
    """Validate a recurrence frequency."""
    if frequency not in FREQUENCIES:
        return False, f"Frequency must be one of: {', '.join(FREQUENCIES)}"
    return True, None


def validate_billing_cycle(cycle: str) -> tuple[bool, str | None]:
    """Validate a subscription billing cycle."""
    if cycle not in BILLING_CYCLES:
        return False, f"Billing cycle must be one of: {', '.join(BILLING_CYCLES)}"
    return True, None

"""
Settlement engine: net balances and minimal transfer plans for a group.
"""
import logging
from decimal import Decimal
from typing import List, Dict
from groupsplit.core.exceptions import NotAMember
from groupsplit.core.utils import to_cents

logger = logging.getLogger(__name__)

# Balances within a cent of zero count as settled
TOLERANCE = Decimal("0.01")


class MemberBalance:
    """A member's net position in a group (positive = is owed money)."""
    def __init__(self, user_id: int, username: str, balance: Decimal = Decimal(0)):
        self.user_id = user_id
        self.username = username
        self.balance = balance

    def __repr__(self):
        return f"MemberBalance({self.user_id!r}, {self.username!r}, {self.balance})"


class Transfer:
    """Represents a single suggested transfer between members."""
    def __init__(self, from_user: int, to_user: int, amount: Decimal,
                 from_username: str = "", to_username: str = ""):
        self.from_user = from_user
        self.to_user = to_user
        self.amount = amount
        self.from_username = from_username
        self.to_username = to_username

    def __repr__(self):
        return f"Transfer({self.from_user!r} -> {self.to_user!r}: {self.amount})"


class SettlementPlan:
    """Balances as computed plus the transfers that clear them."""
    def __init__(self, balances: List[MemberBalance], settlements: List[Transfer]):
        self.balances = balances
        self.settlements = settlements

    @property
    def total_transactions(self) -> int:
        return len(self.settlements)


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_balances(members, expenses) -> List[MemberBalance]:
    """
    Derive each member's net balance from expenses and their splits.

    ``members`` is an ordered iterable of ``(user_id, username)``; every
    expense exposes ``paid_by``, ``amount`` and ``splits`` (each with
    ``user_id`` and ``amount``). The payer is credited the full amount and
    each split member debited their share. Rows naming someone who is not a
    member are skipped.
    """
    balances: Dict[int, MemberBalance] = {
        user_id: MemberBalance(user_id, username) for user_id, username in members
    }

    for expense in expenses:
        payer = balances.get(expense.paid_by)
        if payer is not None:
            payer.balance += _as_decimal(expense.amount)
        else:
            logger.warning(f"Expense {getattr(expense, 'id', '?')} paid by non-member {expense.paid_by}; skipped")

        for split in expense.splits:
            member = balances.get(split.user_id)
            if member is not None:
                member.balance -= _as_decimal(split.amount)
            else:
                logger.warning(f"Split for non-member {split.user_id} on expense {getattr(expense, 'id', '?')}; skipped")

    for member in balances.values():
        member.balance = to_cents(member.balance)

    return list(balances.values())


def minimize_transfers(balances: List[MemberBalance]) -> List[Transfer]:
    """
    Greedy debt clearing: repeatedly pay the biggest creditor from the
    biggest debtor until nobody is more than a cent away from zero.

    Works on copies, so the given balances are left untouched. Members with
    equal balances keep their input order (stable sort).
    """
    working = [
        MemberBalance(b.user_id, b.username, b.balance)
        for b in balances
        if abs(b.balance) > TOLERANCE
    ]
    transfers: List[Transfer] = []

    while len(working) > 1:
        working.sort(key=lambda b: b.balance)
        debtor = working[0]
        creditor = working[-1]

        if debtor.balance >= -TOLERANCE or creditor.balance <= TOLERANCE:
            break

        amount = to_cents(min(-debtor.balance, creditor.balance))
        transfers.append(Transfer(
            debtor.user_id,
            creditor.user_id,
            amount,
            from_username=debtor.username,
            to_username=creditor.username
        ))

        debtor.balance += amount
        creditor.balance -= amount

        working = [b for b in working if abs(b.balance) > TOLERANCE]

    return transfers


class SettlementEngine:
    """
    Group settlement operations over an injected store.

    The store provides ``is_member``, ``get_members``, ``get_expenses``,
    ``get_user_group_ids``, ``add_settlements``, ``get_settlements`` and
    ``delete_settlements`` (see ``GroupStore``).
    """

    def __init__(self, store):
        self.store = store

    def _require_member(self, group_id: int, user_id: int):
        if not self.store.is_member(group_id, user_id):
            logger.warning(f"User {user_id} denied access to group {group_id}")
            raise NotAMember()

    def compute_balances(self, group_id: int, user_id: int) -> List[MemberBalance]:
        """Net balance of every member, including those at zero."""
        self._require_member(group_id, user_id)
        members = self.store.get_members(group_id)
        expenses = self.store.get_expenses(group_id)
        return calculate_balances(members, expenses)

    def compute_settlements(self, group_id: int, user_id: int) -> SettlementPlan:
        balances = self.compute_balances(group_id, user_id)
        return SettlementPlan(balances, minimize_transfers(balances))

    def reset_settlements(self, group_id: int, user_id: int) -> int:
        """
        Clear the group's settlement log. Expenses and splits are kept.
        Safe to repeat; an empty log deletes nothing.
        """
        self._require_member(group_id, user_id)
        deleted = self.store.delete_settlements(group_id)
        logger.info(f"User {user_id} reset {deleted} settlement(s) in group {group_id}")
        return deleted

    def confirm_settlements(self, group_id: int, user_id: int):
        """Record the current plan as completed settlements."""
        plan = self.compute_settlements(group_id, user_id)
        if not plan.settlements:
            return []
        records = self.store.add_settlements(group_id, plan.settlements)
        logger.info(f"User {user_id} confirmed {len(records)} settlement(s) in group {group_id}")
        return records

    def settlement_history(self, group_id: int, user_id: int):
        self._require_member(group_id, user_id)
        return self.store.get_settlements(group_id)

    def summarize_user_balance(self, user_id: int) -> Dict[str, Decimal]:
        """Caller's totals across all of their groups."""
        total_owed = Decimal(0)
        total_owing = Decimal(0)

        for group_id in self.store.get_user_group_ids(user_id):
            for member in self.compute_balances(group_id, user_id):
                if member.user_id != user_id:
                    continue
                if member.balance > 0:
                    total_owed += member.balance
                elif member.balance < 0:
                    total_owing += -member.balance

        return {
            "total_owed": total_owed,
            "total_owing": total_owing,
            "net_balance": total_owed - total_owing
        }

"""
Core Data Models for the Finance Engine

These models define the shapes the engine consumes from the persistence
and UI collaborators. They are designed to:
1. Enforce type safety at runtime (dates are dates, amounts are Decimals)
2. Be immutable, so an overlay can share rows with its base collection
3. Be serializable for logging

DESIGN DECISION: Amounts are Decimal, never float.
Repeated aggregation over years of transactions must not drift.

DESIGN DECISION: Structural invariants that span several fields
(a TRANSFER needs both account ids) are checked by the validation
package, not here, so that the engine raises its own InvalidArgumentError
at the point of the offending call.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """Kind of account. Informational only; the arithmetic ignores it."""
    BANK = "BANK"
    CARD = "CARD"
    CASH = "CASH"


class TransactionKind(str, Enum):
    """Direction of a money movement."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class TransactionStatus(str, Enum):
    """
    Lifecycle status of a transaction.

    planned -> confirmed, planned -> cancelled and confirmed -> cancelled
    are possible. The engine treats each snapshot as given.
    """
    PLANNED = "planned"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


Amount = Annotated[Decimal, Field(gt=0, description="Positive amount, currency-agnostic")]


# =============================================================================
# ACCOUNTS
# =============================================================================

class Account(BaseModel):
    """
    A place where money lives.

    current_balance / initial_balance are carried for display only.
    The engine derives balances from transactions.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(default="", max_length=200)
    type: AccountType = AccountType.BANK

    # Reserve accounts are savings/side-pockets ("caixinha")
    is_reserve: bool = False
    is_active: bool = True
    is_primary: bool = False

    current_balance: Decimal = Decimal("0")
    initial_balance: Decimal = Decimal("0")


# =============================================================================
# CATEGORIES
# =============================================================================

class Subcategory(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    category_id: str
    name: str


class Category(BaseModel):
    """A spending/earning category with its subcategories."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str
    subcategories: list[Subcategory] = Field(default_factory=list)

    def find_subcategory(self, subcategory_id: Optional[str]) -> Optional[Subcategory]:
        if subcategory_id is None:
            return None
        return next(
            (s for s in self.subcategories if s.id == subcategory_id),
            None,
        )


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single money movement as stored by the persistence collaborator.

    CRITICAL: a row with status == cancelled OR a non-null cancelled_at is
    dead and excluded from every computation, even if the caller forgot to
    filter it out.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    # Identity
    id: str = Field(..., min_length=1)
    household_id: Optional[str] = None

    # Where the money moves
    account_id: str = Field(..., min_length=1)
    to_account_id: Optional[str] = Field(
        default=None,
        description="Destination account; required iff kind is TRANSFER"
    )

    # Classification (never set on TRANSFER)
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None

    kind: TransactionKind
    status: TransactionStatus
    amount: Amount

    date: date
    due_date: Optional[date] = Field(
        default=None,
        description="Only meaningful for EXPENSE"
    )
    description: Optional[str] = Field(default=None, max_length=500)

    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    # Installment grouping
    installment_group_id: Optional[str] = None
    installment_number: Optional[int] = Field(default=None, ge=1)
    installment_total: Optional[int] = Field(default=None, ge=1)

    @property
    def is_cancelled(self) -> bool:
        """Dead rows: cancelled status or a cancellation stamp."""
        return (
            self.status == TransactionStatus.CANCELLED
            or self.cancelled_at is not None
        )

    @property
    def is_confirmed(self) -> bool:
        return self.status == TransactionStatus.CONFIRMED and not self.is_cancelled

    @property
    def is_planned(self) -> bool:
        return self.status == TransactionStatus.PLANNED and not self.is_cancelled


class TransactionDraft(BaseModel):
    """
    Minimal shape the UI hands over to create a simulated transaction.

    Unset optional fields become null on the generated row.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    account_id: str = Field(..., min_length=1)
    kind: TransactionKind
    amount: Amount
    date: date
    status: TransactionStatus = Field(
        ...,
        description="planned or confirmed; a cancelled draft makes no sense"
    )

    id: Optional[str] = None
    to_account_id: Optional[str] = None
    due_date: Optional[date] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator('status')
    @classmethod
    def validate_status(cls, v: TransactionStatus) -> TransactionStatus:
        """Only live statuses can be simulated."""
        if v == TransactionStatus.CANCELLED:
            raise ValueError("A draft must be planned or confirmed")
        return v


# =============================================================================
# BUDGETS
# =============================================================================

class Budget(BaseModel):
    """
    Planned spend for a category (or one of its subcategories) in a month.

    subcategory_id None means the budget covers the whole category.
    The month scope is implicit: the caller passes the budgets of the
    month being evaluated.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: Optional[str] = None
    category_id: str = Field(..., min_length=1)
    subcategory_id: Optional[str] = None
    planned_amount: Decimal = Field(..., ge=0)

import enum
from sqlalchemy import Column, DateTime, Enum, Numeric, String
from shopledger.core.database import Base
from shopledger.models.common import generate_custom_id, utcnow


class EntityType(str, enum.Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class TransactionType(str, enum.Enum):
    PAYMENT = "payment"
    EXPENSE = "expense"
    PURCHASE = "purchase"
    INITIAL_DEBT = "initial_debt"
    STOCK_ADJUSTMENT = "stock_adjustment"


class Transaction(Base):
    """Append-only ledger entry. Never updated by the engine."""

    __tablename__ = "transactions"

    id = Column(String(20), primary_key=True,
                default=lambda: generate_custom_id("TXN"))

    # No FK, stock adjustments may be owned by "system"
    entity_id = Column(String(20), nullable=False, index=True)
    entity_type = Column(Enum(EntityType), nullable=False)
    type = Column(Enum(TransactionType), nullable=False)

    # Negative for stock restorations
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String(500), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

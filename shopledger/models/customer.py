import enum
from sqlalchemy import Column, DateTime, Enum, Integer, Numeric, String
from shopledger.core.database import Base
from shopledger.models.common import generate_custom_id, utcnow


class CustomerCategory(str, enum.Enum):
    WHOLESALE = "wholesale"
    WALK_IN = "walk_in"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(20), primary_key=True,
                default=lambda: generate_custom_id("CUS"))
    name = Column(String(255), nullable=False)
    contact = Column(String(50), nullable=True)
    category = Column(Enum(CustomerCategory), nullable=False,
                      default=CustomerCategory.WALK_IN)

    # Cached, derived from orders by the pending calculator
    pending_amount = Column(Numeric(15, 2), nullable=False, default=0)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True),
                        default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Customer(id='{self.id}', name='{self.name}')>"

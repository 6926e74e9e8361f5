import enum
from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String
from shopledger.core.database import Base
from shopledger.models.common import generate_custom_id, utcnow


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class OrderStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(20), primary_key=True,
                default=lambda: generate_custom_id("ORD"))
    customer_id = Column(String(20), ForeignKey("customers.id"),
                         nullable=False, index=True)

    # [{"type": "chicken", "quantity": "2.5", "rate": "220.00", "details": null}, ...]
    items = Column(JSON, nullable=False, default=list)

    total_amount = Column(Numeric(15, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(15, 2), nullable=False, default=0)
    payment_status = Column(Enum(PaymentStatus), nullable=False,
                            default=PaymentStatus.PENDING)
    order_status = Column(Enum(OrderStatus), nullable=False,
                          default=OrderStatus.CONFIRMED)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True),
                        default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

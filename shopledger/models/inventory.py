from sqlalchemy import Column, DateTime, Integer, Numeric, String
from shopledger.core.database import Base
from shopledger.models.common import generate_custom_id, utcnow


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(String(20), primary_key=True,
                default=lambda: generate_custom_id("INV"))
    name = Column(String(100), nullable=False)
    type = Column(String(50), unique=True, nullable=False, index=True)
    quantity = Column(Numeric(12, 3), nullable=False, default=0)
    unit = Column(String(10), nullable=False, default="kg")
    price = Column(Numeric(15, 2), nullable=False, default=0)

    # Plain string, stock adjustments can be attributed to "system"
    supplier_id = Column(String(20), nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True),
                        default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

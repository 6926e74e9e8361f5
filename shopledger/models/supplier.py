from sqlalchemy import Column, DateTime, Integer, Numeric, String
from shopledger.core.database import Base
from shopledger.models.common import generate_custom_id, utcnow


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(String(20), primary_key=True,
                default=lambda: generate_custom_id("SUP"))
    name = Column(String(255), nullable=False)
    contact = Column(String(50), nullable=True)

    # Cached payable, derived from the transaction ledger
    pending_amount = Column(Numeric(15, 2), nullable=False, default=0)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True),
                        default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Supplier(id='{self.id}', name='{self.name}')>"

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from splitchat.db.session import Base

class SplitBill(Base):
    __tablename__ = "split_bills"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(200), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, server_default="INR")
    created_by = Column(String, nullable=False, index=True)
    group_id = Column(String, nullable=True, index=True)
    split_type = Column(String, nullable=False, server_default="equal")
    category = Column(String, nullable=False, server_default="Other")
    notes = Column(Text, nullable=True)
    is_settled = Column(Boolean, nullable=False, default=False)
    is_cancelled = Column(Boolean, nullable=False, default=False)
    settled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    participants = relationship(
        "SplitParticipant",
        back_populates="split_bill",
        cascade="all, delete-orphan",
        order_by="SplitParticipant.position",
        lazy="selectin",
    )

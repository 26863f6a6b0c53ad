from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Boolean, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from splitchat.db.session import Base

class SplitParticipant(Base):
    __tablename__ = "split_participants"
    __table_args__ = (UniqueConstraint("split_bill_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    split_bill_id = Column(Integer, ForeignKey("split_bills.id"), nullable=False)
    position = Column(Integer, nullable=False)
    user_id = Column(String, nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    is_rejected = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)

    split_bill = relationship("SplitBill", back_populates="participants")

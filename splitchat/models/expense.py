from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, ForeignKey
from sqlalchemy.sql import func
from splitchat.db.session import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    group_id = Column(String, nullable=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(String(200), nullable=True)
    category = Column(String, nullable=False, server_default="Other")
    # Set when the expense mirrors a split bill
    split_bill_id = Column(Integer, ForeignKey("split_bills.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    is_deleted = Column(Boolean, nullable=False, default=False)

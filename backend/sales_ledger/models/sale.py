from sqlalchemy import Column, Integer, String, Numeric, DateTime, func
from sales_ledger.db.database import Base


class Sale(Base):
    __tablename__ = "sales"
    # Ids are never handed out twice, even after deletes
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_name = Column(String(255), nullable=False, server_default="")
    product_name = Column(String(255), nullable=False, server_default="")
    cell_type = Column(String(100))
    warranty = Column(String(100))
    quantity = Column(Integer, nullable=False, server_default="0")
    price = Column(Numeric(10, 2), nullable=False, server_default="0")
    payment_method = Column(String(50), nullable=False, server_default="CASH")
    created_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

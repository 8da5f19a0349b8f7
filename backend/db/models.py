"""
StoreLedger Database Models

11 tables for the store database.

Tables:
  Catalog & staff:
  1. products                  - Product catalog (price guarded on insert)
  2. employees                 - Store staff
  3. customers                 - Customer contacts
  4. suppliers                 - Product suppliers (contact changes audited)
  5. store_locations           - Physical store locations

  Link tables:
  6. product_suppliers         - Which supplier carries which product
  7. employee_locations        - Which employee works at which location
  8. customer_feedback         - Free-text customer feedback

  Sales:
  9. sales_transactions        - One row per sale (inserts audited)

  Audit ledgers (append-only, written by audit hooks):
  10. sales_log                - Copy of every inserted sales transaction
  11. supplier_contact_history - Before/after of every supplier contact change
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)

from core.clock import utcnow
from db.session import Base

# ─── 1. Products ───────────────────────────────────────────────────────────


class Product(Base):
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, autoincrement=False)
    product_name = Column(String(100))
    price = Column(Numeric(10, 2))

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        Index("idx_product_name", "product_name"),
    )

    def __repr__(self):
        return f"<Product(product_id={self.product_id}, product_name={self.product_name!r}, price={self.price})>"


# ─── 2. Employees ──────────────────────────────────────────────────────────


class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(Integer, primary_key=True, autoincrement=False)
    employee_name = Column(String(100))
    position = Column(String(50))

    __table_args__ = (Index("idx_employee_name", "employee_name"),)


# ─── 3. Customers ──────────────────────────────────────────────────────────


class Customer(Base):
    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True, autoincrement=False)
    customer_name = Column(String(100))
    contact_info = Column(String(100))

    __table_args__ = (Index("idx_customer_name", "customer_name"),)


# ─── 4. Suppliers ──────────────────────────────────────────────────────────


class Supplier(Base):
    __tablename__ = "suppliers"

    supplier_id = Column(Integer, primary_key=True, autoincrement=False)
    supplier_name = Column(String(100))
    contact_info = Column(String(100))


# ─── 5. Store Locations ────────────────────────────────────────────────────


class StoreLocation(Base):
    __tablename__ = "store_locations"

    location_id = Column(Integer, primary_key=True, autoincrement=False)
    location_name = Column(String(100))
    address = Column(String(100))


# ─── 6. Product Suppliers ──────────────────────────────────────────────────


class ProductSupplier(Base):
    __tablename__ = "product_suppliers"

    product_id = Column(Integer, ForeignKey("products.product_id"), primary_key=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.supplier_id"), primary_key=True)


# ─── 7. Employee Locations ─────────────────────────────────────────────────


class EmployeeLocation(Base):
    __tablename__ = "employee_locations"

    employee_id = Column(Integer, ForeignKey("employees.employee_id"), primary_key=True)
    location_id = Column(Integer, ForeignKey("store_locations.location_id"), primary_key=True)


# ─── 8. Customer Feedback ──────────────────────────────────────────────────


class CustomerFeedback(Base):
    __tablename__ = "customer_feedback"

    feedback_id = Column(Integer, primary_key=True, autoincrement=False)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"))
    feedback = Column(Text)


# ─── 9. Sales Transactions ─────────────────────────────────────────────────


class SalesTransaction(Base):
    __tablename__ = "sales_transactions"

    transaction_id = Column(Integer, primary_key=True, autoincrement=False)
    product_id = Column(Integer, ForeignKey("products.product_id"))
    employee_id = Column(Integer, ForeignKey("employees.employee_id"))
    quantity = Column(Integer)


# ─── 10. Sales Log ─────────────────────────────────────────────────────────


class SalesLog(Base):
    """Append-only copy of every sales transaction insert."""

    __tablename__ = "sales_log"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(Integer, ForeignKey("sales_transactions.transaction_id", name="fk_sales_log_transaction"))
    product_id = Column(Integer, ForeignKey("products.product_id", name="fk_sales_log_product"))
    employee_id = Column(Integer, ForeignKey("employees.employee_id", name="fk_sales_log_employee"))
    quantity = Column(Integer)
    log_time = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (Index("ix_sales_log_transaction", "transaction_id"),)


# ─── 11. Supplier Contact History ──────────────────────────────────────────


class SupplierContactHistory(Base):
    """Append-only before/after record of supplier contact_info changes."""

    __tablename__ = "supplier_contact_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_id = Column(
        Integer,
        ForeignKey("suppliers.supplier_id", name="fk_supplier_contact_history_supplier"),
    )
    old_contact_info = Column(String(100))
    new_contact_info = Column(String(100))
    change_date = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (Index("ix_contact_history_supplier", "supplier_id", "change_date"),)


# Registers view DDL on Base.metadata (after_create / before_drop).
import db.views  # noqa: E402,F401

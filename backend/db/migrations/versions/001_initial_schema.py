"""
Initial schema - 11 tables, name indexes, 3 views

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # 1. Products
    op.create_table(
        "products",
        sa.Column("product_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("product_name", sa.String(100)),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )
    op.create_index("idx_product_name", "products", ["product_name"])

    # 2. Employees
    op.create_table(
        "employees",
        sa.Column("employee_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("employee_name", sa.String(100)),
        sa.Column("position", sa.String(50)),
    )
    op.create_index("idx_employee_name", "employees", ["employee_name"])

    # 3. Customers
    op.create_table(
        "customers",
        sa.Column("customer_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("customer_name", sa.String(100)),
        sa.Column("contact_info", sa.String(100)),
    )
    op.create_index("idx_customer_name", "customers", ["customer_name"])

    # 4. Suppliers
    op.create_table(
        "suppliers",
        sa.Column("supplier_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("supplier_name", sa.String(100)),
        sa.Column("contact_info", sa.String(100)),
    )

    # 5. Store locations
    op.create_table(
        "store_locations",
        sa.Column("location_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("location_name", sa.String(100)),
        sa.Column("address", sa.String(100)),
    )

    # 6. Product suppliers
    op.create_table(
        "product_suppliers",
        sa.Column("product_id", sa.Integer, sa.ForeignKey("products.product_id"), primary_key=True),
        sa.Column("supplier_id", sa.Integer, sa.ForeignKey("suppliers.supplier_id"), primary_key=True),
    )

    # 7. Employee locations
    op.create_table(
        "employee_locations",
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("employees.employee_id"), primary_key=True),
        sa.Column("location_id", sa.Integer, sa.ForeignKey("store_locations.location_id"), primary_key=True),
    )

    # 8. Customer feedback
    op.create_table(
        "customer_feedback",
        sa.Column("feedback_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("customer_id", sa.Integer, sa.ForeignKey("customers.customer_id")),
        sa.Column("feedback", sa.Text),
    )

    # 9. Sales transactions
    op.create_table(
        "sales_transactions",
        sa.Column("transaction_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("product_id", sa.Integer, sa.ForeignKey("products.product_id")),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("employees.employee_id")),
        sa.Column("quantity", sa.Integer),
    )

    # 10. Sales log
    op.create_table(
        "sales_log",
        sa.Column("log_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "transaction_id",
            sa.Integer,
            sa.ForeignKey("sales_transactions.transaction_id", name="fk_sales_log_transaction"),
        ),
        sa.Column("product_id", sa.Integer, sa.ForeignKey("products.product_id", name="fk_sales_log_product")),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("employees.employee_id", name="fk_sales_log_employee")),
        sa.Column("quantity", sa.Integer),
        sa.Column("log_time", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_sales_log_transaction", "sales_log", ["transaction_id"])

    # 11. Supplier contact history
    op.create_table(
        "supplier_contact_history",
        sa.Column("history_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "supplier_id",
            sa.Integer,
            sa.ForeignKey("suppliers.supplier_id", name="fk_supplier_contact_history_supplier"),
        ),
        sa.Column("old_contact_info", sa.String(100)),
        sa.Column("new_contact_info", sa.String(100)),
        sa.Column("change_date", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_contact_history_supplier", "supplier_contact_history", ["supplier_id", "change_date"])

    # Views
    op.execute(
        """
        CREATE VIEW view_with_join AS
        SELECT p.product_name, s.quantity, e.employee_name
        FROM products p
        JOIN sales_transactions s ON p.product_id = s.product_id
        JOIN employees e ON s.employee_id = e.employee_id
        """
    )
    op.execute(
        """
        CREATE VIEW view_with_union AS
        SELECT product_name AS name, 'Product' AS type FROM products
        UNION
        SELECT employee_name, 'Employee' FROM employees
        """
    )
    op.execute(
        """
        CREATE VIEW simple_view AS
        SELECT customer_name, contact_info FROM customers
        """
    )


def downgrade() -> None:
    op.execute("DROP VIEW IF EXISTS simple_view")
    op.execute("DROP VIEW IF EXISTS view_with_union")
    op.execute("DROP VIEW IF EXISTS view_with_join")
    op.drop_table("supplier_contact_history")
    op.drop_table("sales_log")
    op.drop_table("sales_transactions")
    op.drop_table("customer_feedback")
    op.drop_table("employee_locations")
    op.drop_table("product_suppliers")
    op.drop_table("store_locations")
    op.drop_table("suppliers")
    op.drop_table("customers")
    op.drop_table("employees")
    op.drop_table("products")

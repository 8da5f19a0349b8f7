"""
Read-only views.

Each view is kept as a SQLAlchemy selectable so it can be queried directly
and also materialized as a database VIEW after ``metadata.create_all``.
"""

import structlog
from sqlalchemy import event, literal, select, union
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Customer, Employee, Product, SalesTransaction
from db.session import Base

logger = structlog.get_logger()

# Product name, quantity sold, and the employee who sold it
view_with_join = (
    select(Product.product_name, SalesTransaction.quantity, Employee.employee_name)
    .select_from(Product)
    .join(SalesTransaction, Product.product_id == SalesTransaction.product_id)
    .join(Employee, SalesTransaction.employee_id == Employee.employee_id)
)

# Product and employee names in one column, tagged by kind; UNION drops duplicates
view_with_union = union(
    select(Product.product_name.label("name"), literal("Product").label("type")),
    select(Employee.employee_name.label("name"), literal("Employee").label("type")),
)

simple_view = select(Customer.customer_name, Customer.contact_info)

VIEWS = {
    "view_with_join": view_with_join,
    "view_with_union": view_with_union,
    "simple_view": simple_view,
}


def view_ddl(name: str, dialect) -> str:
    """Render CREATE VIEW for the given dialect with all literals inlined."""
    body = VIEWS[name].compile(dialect=dialect, compile_kwargs={"literal_binds": True})
    if dialect.name == "postgresql":
        return f"CREATE OR REPLACE VIEW {name} AS {body}"
    return f"CREATE VIEW IF NOT EXISTS {name} AS {body}"


@event.listens_for(Base.metadata, "after_create")
def create_views(target, connection, **kw):
    for name in VIEWS:
        connection.exec_driver_sql(view_ddl(name, connection.dialect))


@event.listens_for(Base.metadata, "before_drop")
def drop_views(target, connection, **kw):
    for name in VIEWS:
        connection.exec_driver_sql(f"DROP VIEW IF EXISTS {name}")


async def read_view(db: AsyncSession, name: str) -> list[dict]:
    """Return the rows of a view as plain dicts."""
    if name not in VIEWS:
        raise KeyError(f"Unknown view '{name}'")
    result = await db.execute(VIEWS[name])
    rows = [dict(row._mapping) for row in result.all()]
    logger.debug("views.read", view=name, rows=len(rows))
    return rows

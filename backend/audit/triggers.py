"""
Audit Triggers — the three rules that guard and record base-table writes.

  products            before_insert  reject the whole batch on any negative price
  sales_transactions  after_insert   append one sales_log row per sale
  suppliers           after_update   append a contact history row when
                                     contact_info actually changed

A contact history row needs a changed value; setting contact_info to the
value it already holds records nothing.

The default ``audit_registry`` is what every repository uses unless a
caller passes its own.
"""

from decimal import Decimal, InvalidOperation

from audit.registry import AFTER_INSERT, AFTER_UPDATE, BEFORE_INSERT, AuditRegistry, RowImage
from core.exceptions import PriceValidationError
from db.models import SalesLog, SupplierContactHistory

audit_registry = AuditRegistry()


@audit_registry.listens_for("products", BEFORE_INSERT)
def reject_negative_prices(rows: list[RowImage]) -> PriceValidationError | None:
    """
    Reject the batch if any price is negative or not a number.

    NULL prices pass, as in a SQL `price < 0` comparison. Unparseable prices
    are reported here with their own message rather than left to the engine.
    """
    unparseable, negative = [], []
    for row in rows:
        if row.get("price") is None:
            continue
        try:
            price = Decimal(str(row["price"]))
        except InvalidOperation:
            price = None
        if price is None or price.is_nan() or price.is_infinite():
            unparseable.append(row.get("product_id"))
        elif price < 0:
            negative.append(row.get("product_id"))

    if unparseable:
        return PriceValidationError(unparseable, message="Price must be a finite number")
    if negative:
        return PriceValidationError(negative)
    return None


@audit_registry.listens_for("sales_transactions", AFTER_INSERT)
def log_sales_transaction(before: RowImage | None, after: RowImage) -> SalesLog:
    # log_time is filled by the column default at flush, i.e. at append time.
    return SalesLog(
        transaction_id=after["transaction_id"],
        product_id=after["product_id"],
        employee_id=after["employee_id"],
        quantity=after["quantity"],
    )


@audit_registry.listens_for("suppliers", AFTER_UPDATE)
def record_contact_change(before: RowImage, after: RowImage) -> SupplierContactHistory | None:
    if before["supplier_id"] != after["supplier_id"]:
        return None
    if before["contact_info"] == after["contact_info"]:
        return None
    return SupplierContactHistory(
        supplier_id=after["supplier_id"],
        old_contact_info=before["contact_info"],
        new_contact_info=after["contact_info"],
    )

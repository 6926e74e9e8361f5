"""create ledger tables

Revision ID: b1c2d3e4f5a6
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "b1c2d3e4f5a6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

customer_category = sa.Enum("WHOLESALE", "WALK_IN", name="customercategory")
payment_status = sa.Enum("PENDING", "PARTIALLY_PAID", "PAID", name="paymentstatus")
order_status = sa.Enum("CONFIRMED", "PROCESSING", "COMPLETED", "CANCELLED", name="orderstatus")
entity_type = sa.Enum("CUSTOMER", "SUPPLIER", name="entitytype")
transaction_type = sa.Enum(
    "PAYMENT", "EXPENSE", "PURCHASE", "INITIAL_DEBT", "STOCK_ADJUSTMENT", name="transactiontype"
)


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("contact", sa.String(length=50), nullable=True),
        sa.Column("category", customer_category, nullable=False),
        sa.Column("pending_amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "suppliers",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("contact", sa.String(length=50), nullable=True),
        sa.Column("pending_amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "inventory",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("quantity", sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column("unit", sa.String(length=10), nullable=False),
        sa.Column("price", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("supplier_id", sa.String(length=20), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_inventory_type"), "inventory", ["type"], unique=True)

    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("customer_id", sa.String(length=20), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("total_amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("paid_amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("payment_status", payment_status, nullable=False),
        sa.Column("order_status", order_status, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_orders_customer_id"), "orders", ["customer_id"], unique=False)
    op.create_index(op.f("ix_orders_created_at"), "orders", ["created_at"], unique=False)

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("entity_id", sa.String(length=20), nullable=False),
        sa.Column("entity_type", entity_type, nullable=False),
        sa.Column("type", transaction_type, nullable=False),
        sa.Column("amount", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_transactions_entity_id"), "transactions", ["entity_id"], unique=False)
    op.create_index(op.f("ix_transactions_created_at"), "transactions", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_transactions_created_at"), table_name="transactions")
    op.drop_index(op.f("ix_transactions_entity_id"), table_name="transactions")
    op.drop_table("transactions")
    op.drop_index(op.f("ix_orders_created_at"), table_name="orders")
    op.drop_index(op.f("ix_orders_customer_id"), table_name="orders")
    op.drop_table("orders")
    op.drop_index(op.f("ix_inventory_type"), table_name="inventory")
    op.drop_table("inventory")
    op.drop_table("suppliers")
    op.drop_table("customers")

    bind = op.get_bind()
    for enum_type in (transaction_type, entity_type, order_status, payment_status, customer_category):
        enum_type.drop(bind, checkfirst=True)

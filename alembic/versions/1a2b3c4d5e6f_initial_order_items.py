"""initial order items schema"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "1a2b3c4d5e6f"
down_revision = None
branch_labels = None
depends_on = None

product_type = sa.Enum("FOOD", "DRINK", "SPECIAL", "MENU", name="product_type")
payment_method = sa.Enum("CASH", "CARD", name="payment_method")
order_item_type = sa.Enum(
    "PRODUCT", "MENU", "SPECIAL", "DIVERSE_FOOD", "DIVERSE_DRINK", "DIVERSE_OTHER",
    name="order_item_type",
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "products",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("price", sa.Integer, nullable=False),
        sa.Column("type", product_type, nullable=False),
    )
    op.create_index("ix_products_uuid", "products", ["uuid"], unique=True)

    op.create_table(
        "variation_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("additional_cost", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_variation_items_uuid", "variation_items", ["uuid"], unique=True)

    op.create_table(
        "offers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
    )
    op.create_index("ix_offers_uuid", "offers", ["uuid"], unique=True)

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_method", payment_method, nullable=True),
    )
    op.create_index("ix_orders_uuid", "orders", ["uuid"], unique=True)

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("parent_id", sa.Integer, sa.ForeignKey("order_items.id", ondelete="CASCADE"), nullable=True),
        sa.Column("product_id", sa.Integer, sa.ForeignKey("products.id"), nullable=True),
        sa.Column("offer_id", sa.Integer, sa.ForeignKey("offers.id"), nullable=True),
        sa.Column("type", order_item_type, nullable=False),
        sa.Column("count", sa.Integer, nullable=False, server_default="1"),
        sa.Column("discount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("diverse_price", sa.Integer, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("take_away", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("course", sa.Integer, nullable=True),
        sa.CheckConstraint(
            "(product_id IS NOT NULL AND diverse_price IS NULL)"
            " OR (product_id IS NULL AND diverse_price IS NOT NULL)",
            name="ck_order_items_product_or_diverse_price",
        ),
        sa.CheckConstraint("count > 0", name="ck_order_items_count_positive"),
    )
    op.create_index("ix_order_items_uuid", "order_items", ["uuid"], unique=True)
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_parent_id", "order_items", ["parent_id"])

    op.create_table(
        "order_item_variations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column(
            "order_item_id", sa.Integer, sa.ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("count", sa.Integer, nullable=False, server_default="1"),
    )
    op.create_index("ix_order_item_variations_uuid", "order_item_variations", ["uuid"], unique=True)
    op.create_index("ix_order_item_variations_order_item_id", "order_item_variations", ["order_item_id"])

    op.create_table(
        "order_item_variation_to_variation_items",
        sa.Column(
            "order_item_variation_id",
            sa.Integer,
            sa.ForeignKey("order_item_variations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("variation_item_id", sa.Integer, sa.ForeignKey("variation_items.id"), primary_key=True),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("order_item_variation_to_variation_items")
    op.drop_table("order_item_variations")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("offers")
    op.drop_table("variation_items")
    op.drop_table("products")
    order_item_type.drop(op.get_bind(), checkfirst=True)
    payment_method.drop(op.get_bind(), checkfirst=True)
    product_type.drop(op.get_bind(), checkfirst=True)

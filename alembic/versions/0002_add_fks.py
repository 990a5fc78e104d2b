from alembic import op

revision = '0002_add_fks'
down_revision = '0001_init'
branch_labels = None
depends_on = None

# Batch mode: SQLite cannot ALTER constraints, so the table is rebuilt there.
# On Postgres these run as plain ALTER TABLE statements.

def upgrade():
    # products.created_by -> users.id
    with op.batch_alter_table('products') as batch_op:
        batch_op.create_foreign_key(
            'fk_products_created_by_users',
            'users',
            ['created_by'],
            ['id'],
            ondelete='RESTRICT'
        )
    # orders.user_id -> users.id
    with op.batch_alter_table('orders') as batch_op:
        batch_op.create_foreign_key(
            'fk_orders_user_id_users',
            'users',
            ['user_id'],
            ['id'],
            ondelete='RESTRICT'
        )
    with op.batch_alter_table('order_items') as batch_op:
        # order_items.order_id -> orders.id
        batch_op.create_foreign_key(
            'fk_order_items_order_id_orders',
            'orders',
            ['order_id'],
            ['id'],
            ondelete='CASCADE'
        )
        # order_items.item_id -> grocery_items.id
        batch_op.create_foreign_key(
            'fk_order_items_item_id_grocery_items',
            'grocery_items',
            ['item_id'],
            ['id'],
            ondelete='RESTRICT'
        )

def downgrade():
    with op.batch_alter_table('order_items') as batch_op:
        batch_op.drop_constraint('fk_order_items_item_id_grocery_items', type_='foreignkey')
        batch_op.drop_constraint('fk_order_items_order_id_orders', type_='foreignkey')
    with op.batch_alter_table('orders') as batch_op:
        batch_op.drop_constraint('fk_orders_user_id_users', type_='foreignkey')
    with op.batch_alter_table('products') as batch_op:
        batch_op.drop_constraint('fk_products_created_by_users', type_='foreignkey')

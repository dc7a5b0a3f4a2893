"""create users, suppliers, products and product images tables

Revision ID: 001
Revises: 
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    op.create_table(
        'suppliers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('phone', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_suppliers_user', 'suppliers', ['user_id'])

    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('supplier_id', sa.Uuid(), sa.ForeignKey('suppliers.id'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('primary_image_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('price >= 0', name='non_negative_price'),
    )
    op.create_index('idx_products_user_created', 'products', ['user_id', 'created_at'])
    op.create_index('idx_products_supplier', 'products', ['supplier_id'])

    op.create_table(
        'product_images',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('product_id', sa.Uuid(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('path', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_product_images_product_created', 'product_images', ['product_id', 'created_at'])

    # products <-> product_images cycle: add the primary pointer constraint last.
    # SQLite cannot ALTER constraints in; the service layer keeps the pointer valid there.
    if op.get_bind().dialect.name != 'sqlite':
        op.create_foreign_key(
            'fk_products_primary_image',
            'products', 'product_images',
            ['primary_image_id'], ['id'],
            ondelete='SET NULL',
        )


def downgrade() -> None:
    if op.get_bind().dialect.name != 'sqlite':
        op.drop_constraint('fk_products_primary_image', 'products', type_='foreignkey')
    op.drop_index('idx_product_images_product_created', table_name='product_images')
    op.drop_table('product_images')
    op.drop_index('idx_products_supplier', table_name='products')
    op.drop_index('idx_products_user_created', table_name='products')
    op.drop_table('products')
    op.drop_index('idx_suppliers_user', table_name='suppliers')
    op.drop_table('suppliers')
    op.drop_table('users')

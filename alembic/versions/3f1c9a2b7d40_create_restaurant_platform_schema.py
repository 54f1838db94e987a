"""create_restaurant_platform_schema

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Tables holding per-restaurant rows (protected by row-level security)
TENANT_OWNED_TABLES = (
    'menu_categories',
    'menu_items',
    'modifier_groups',
    'modifier_options',
    'promotional_images',
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _tenant_fk() -> list:
    return [
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
    ]


def upgrade() -> None:
    """
    Create the restaurant platform schema.

    Creates:
    - tenants (partial unique indexes on subdomain/custom_domain of live rows)
    - admin_users, subscriptions
    - menu_categories, menu_items, menu_item_modifier_groups
    - modifier_groups, modifier_options, promotional_images

    PostgreSQL only:
    - Row-level security on every tenant-owned table, keyed on the
      transaction setting app.current_tenant
    """
    # 1. Tenants
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_name', sa.String(length=255), nullable=False),
        sa.Column('business_name', sa.String(length=255), nullable=True),
        sa.Column('subdomain', sa.String(length=63), nullable=False),
        sa.Column('custom_domain', sa.String(length=253), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('subscription_status', sa.String(length=8), nullable=False),
        sa.Column('subscription_tier', sa.String(length=12), nullable=False),
        sa.Column('billing_email', sa.String(length=254), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=254), nullable=True),
        sa.Column('address_line1', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('primary_color', sa.String(length=20), nullable=False),
        sa.Column('onboarding_completed', sa.Boolean(), nullable=False),
        sa.Column('total_menu_items', sa.Integer(), nullable=False),
        sa.Column('total_categories', sa.Integer(), nullable=False),
        sa.Column('total_admin_users', sa.Integer(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'])
    op.create_index('ix_tenants_custom_domain', 'tenants', ['custom_domain'])
    op.create_index('ix_tenants_billing_email', 'tenants', ['billing_email'])
    op.create_index(
        'uq_tenants_subdomain_live',
        'tenants',
        ['subdomain'],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
        sqlite_where=sa.text('deleted_at IS NULL'),
    )
    op.create_index(
        'uq_tenants_custom_domain_live',
        'tenants',
        ['custom_domain'],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
        sqlite_where=sa.text('deleted_at IS NULL'),
    )

    # 2. Admin users (id is the identity provider subject)
    op.create_table(
        'admin_users',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('role', sa.String(length=11), nullable=False),
        sa.Column('is_super_admin', sa.Boolean(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admin_users_email', 'admin_users', ['email'], unique=True)
    op.create_index('ix_admin_users_tenant_id', 'admin_users', ['tenant_id'])

    # 3. Subscriptions (one per tenant)
    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('stripe_customer_id', sa.String(length=255), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(length=255), nullable=True),
        sa.Column('plan', sa.String(length=50), nullable=False),
        sa.Column('billing_cycle', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=8), nullable=False),
        sa.Column('current_period_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('current_period_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False),
        sa.Column('trial_ends_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id'),
        sa.UniqueConstraint('stripe_subscription_id'),
    )
    op.create_index(
        'ix_subscriptions_stripe_customer_id', 'subscriptions', ['stripe_customer_id']
    )

    # 4. Menu categories
    op.create_table(
        'menu_categories',
        sa.Column('id', sa.Integer(), nullable=False),
        *_tenant_fk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('icon', sa.String(length=100), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_menu_categories_tenant_id', 'menu_categories', ['tenant_id'])
    op.create_index(
        'ix_menu_categories_tenant_position', 'menu_categories', ['tenant_id', 'position']
    )

    # 5. Modifier groups and options
    op.create_table(
        'modifier_groups',
        sa.Column('id', sa.Integer(), nullable=False),
        *_tenant_fk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=8), nullable=False),
        sa.Column('required', sa.Boolean(), nullable=False),
        sa.Column('min_selections', sa.Integer(), nullable=False),
        sa.Column('max_selections', sa.Integer(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_modifier_groups_tenant_id', 'modifier_groups', ['tenant_id'])

    op.create_table(
        'modifier_options',
        sa.Column('id', sa.Integer(), nullable=False),
        *_tenant_fk(),
        sa.Column('group_id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=255), nullable=False),
        sa.Column('price_modifier', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['group_id'], ['modifier_groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_modifier_options_tenant_id', 'modifier_options', ['tenant_id'])
    op.create_index('ix_modifier_options_group_id', 'modifier_options', ['group_id'])

    # 6. Menu items and their modifier groups
    op.create_table(
        'menu_items',
        sa.Column('id', sa.Integer(), nullable=False),
        *_tenant_fk(),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('portion', sa.String(length=100), nullable=True),
        sa.Column('variants', sa.JSON(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['menu_categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_menu_items_tenant_id', 'menu_items', ['tenant_id'])
    op.create_index('ix_menu_items_category_id', 'menu_items', ['category_id'])
    op.create_index(
        'ix_menu_items_tenant_category_position',
        'menu_items',
        ['tenant_id', 'category_id', 'position'],
    )

    op.create_table(
        'menu_item_modifier_groups',
        sa.Column('menu_item_id', sa.Integer(), nullable=False),
        sa.Column('modifier_group_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['menu_item_id'], ['menu_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['modifier_group_id'], ['modifier_groups.id'], ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('menu_item_id', 'modifier_group_id'),
    )

    # 7. Promotional images
    op.create_table(
        'promotional_images',
        sa.Column('id', sa.Integer(), nullable=False),
        *_tenant_fk(),
        sa.Column('image_url', sa.String(length=500), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('link_url', sa.String(length=500), nullable=True),
        sa.Column('link_menu_item_id', sa.Integer(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['link_menu_item_id'], ['menu_items.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_promotional_images_tenant_id', 'promotional_images', ['tenant_id'])

    # 8. Row-level security (PostgreSQL)
    if op.get_bind().dialect.name == 'postgresql':
        for table in TENANT_OWNED_TABLES:
            op.execute(f'ALTER TABLE {table} ENABLE ROW LEVEL SECURITY')
            op.execute(f'ALTER TABLE {table} FORCE ROW LEVEL SECURITY')
            op.execute(
                f"""
                CREATE POLICY tenant_isolation ON {table}
                USING (tenant_id = NULLIF(current_setting('app.current_tenant', true), '')::integer)
                WITH CHECK (tenant_id = NULLIF(current_setting('app.current_tenant', true), '')::integer)
                """
            )


def downgrade() -> None:
    """Drop the restaurant platform schema."""
    if op.get_bind().dialect.name == 'postgresql':
        for table in TENANT_OWNED_TABLES:
            op.execute(f'DROP POLICY IF EXISTS tenant_isolation ON {table}')

    op.drop_table('promotional_images')
    op.drop_table('menu_item_modifier_groups')
    op.drop_table('menu_items')
    op.drop_table('modifier_options')
    op.drop_table('modifier_groups')
    op.drop_table('menu_categories')
    op.drop_table('subscriptions')
    op.drop_table('admin_users')
    op.drop_table('tenants')

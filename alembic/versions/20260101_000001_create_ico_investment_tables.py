"""Create ICO investment tables.

Revision ID: 20260101_000001
Revises:
Create Date: 2026-01-01

Investors, their transactions, refunds and attribute index, campaign
settings and campaign ledger counters.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20260101_000001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create ICO investment tables."""
    op.create_table(
        'investors',
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('confirmation_token', sa.Uuid(), nullable=True),
        sa.Column('pay_in_btc_address', sa.String(length=255), nullable=True),
        sa.Column('pay_in_eth_address', sa.String(length=255), nullable=True),
        sa.Column('amount_btc', sa.DECIMAL(precision=38, scale=18), nullable=False, server_default='0'),
        sa.Column('amount_eth', sa.DECIMAL(precision=38, scale=18), nullable=False, server_default='0'),
        sa.Column('amount_fiat', sa.DECIMAL(precision=38, scale=18), nullable=False, server_default='0'),
        sa.Column('amount_usd', sa.DECIMAL(precision=38, scale=18), nullable=False, server_default='0'),
        sa.Column('amount_token', sa.DECIMAL(precision=38, scale=18), nullable=False, server_default='0'),
        sa.Column('kyc_request_id', sa.String(length=64), nullable=True),
        sa.Column('kyc_requested_utc', sa.DateTime(timezone=True), nullable=True),
        sa.Column('referral_code', sa.String(length=32), nullable=True),
        sa.Column('referral_code_utc', sa.DateTime(timezone=True), nullable=True),
        sa.Column('referral_code_applied', sa.String(length=32), nullable=True),
        sa.Column('referrals_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'updated_utc',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('email'),
        sa.UniqueConstraint('referral_code'),
        sa.CheckConstraint('amount_usd >= 0', name='check_investor_amount_usd_non_negative'),
        sa.CheckConstraint('amount_token >= 0', name='check_investor_amount_token_non_negative'),
        sa.CheckConstraint('referrals_number >= 0', name='check_investor_referrals_non_negative'),
    )

    op.create_table(
        'investor_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('unique_id', sa.String(length=255), nullable=False),
        sa.Column('created_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('currency', sa.String(length=16), nullable=False),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        sa.Column('block_id', sa.String(length=255), nullable=True),
        sa.Column('pay_in_address', sa.String(length=255), nullable=True),
        sa.Column('amount', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('fee', sa.DECIMAL(precision=38, scale=18), nullable=False, server_default='0'),
        sa.Column('amount_usd', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('amount_token', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('token_price', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column(
            'token_price_context',
            sa.Text(),
            nullable=False,
            comment='JSON list of price tiers'
        ),
        sa.Column('exchange_rate', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column(
            'exchange_rate_context',
            sa.Text(),
            nullable=False,
            comment='JSON list of source rates'
        ),
        sa.Column(
            'processed_utc',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', 'unique_id', name='uq_investor_transaction_email_unique_id'),
    )
    op.create_index(
        'ix_investor_transactions_email', 'investor_transactions', ['email']
    )
    op.create_index(
        'idx_investor_transaction_created', 'investor_transactions', ['created_utc']
    )

    op.create_table(
        'investor_refunds',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('reason', sa.String(length=32), nullable=False),
        sa.Column('message_json', sa.Text(), nullable=False),
        sa.Column(
            'created_utc',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_investor_refunds_email', 'investor_refunds', ['email'])

    op.create_table(
        'investor_attributes',
        sa.Column('attribute_type', sa.String(length=32), nullable=False),
        sa.Column('value', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('attribute_type', 'value', name='pk_investor_attribute'),
    )
    op.create_index('ix_investor_attributes_email', 'investor_attributes', ['email'])

    op.create_table(
        'campaign_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('pre_sale_start_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('pre_sale_end_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('pre_sale_total_tokens_amount', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('crowd_sale_start_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('crowd_sale_end_utc', sa.DateTime(timezone=True), nullable=False),
        sa.Column('crowd_sale_total_tokens_amount', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('token_base_price_usd', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('token_decimals', sa.Integer(), nullable=False),
        sa.Column('min_invest_amount_usd', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('hard_cap_usd', sa.DECIMAL(precision=38, scale=18), nullable=False),
        sa.Column('enable_referral_program', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('referral_discount', sa.DECIMAL(precision=5, scale=2), nullable=True),
        sa.Column('referral_owner_discount', sa.DECIMAL(precision=5, scale=2), nullable=True),
        sa.Column('referral_code_length', sa.Integer(), nullable=True),
        sa.Column('kyc_enable_request_sending', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('kyc_threshold_usd', sa.DECIMAL(precision=38, scale=18), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'campaign_info',
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('value', sa.DECIMAL(precision=38, scale=18), nullable=False, server_default='0'),
        sa.Column(
            'updated_utc',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('name'),
    )


def downgrade() -> None:
    """Drop ICO investment tables."""
    op.drop_table('campaign_info')
    op.drop_table('campaign_settings')
    op.drop_index('ix_investor_attributes_email', table_name='investor_attributes')
    op.drop_table('investor_attributes')
    op.drop_index('ix_investor_refunds_email', table_name='investor_refunds')
    op.drop_table('investor_refunds')
    op.drop_index('idx_investor_transaction_created', table_name='investor_transactions')
    op.drop_index('ix_investor_transactions_email', table_name='investor_transactions')
    op.drop_table('investor_transactions')
    op.drop_table('investors')

"""Create scoring config, score request, audit log and quote tables

Revision ID: 0001_create_underwriting_tables
Revises: 
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_underwriting_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    table_names = set(inspector.get_table_names())

    if 'scoring_configs' not in table_names:
        op.create_table(
            'scoring_configs',
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('insurer_id', sa.String(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=True),
            sa.Column('config', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
        )
        op.create_index(op.f('ix_scoring_configs_id'), 'scoring_configs', ['id'], unique=False)
        op.create_index(op.f('ix_scoring_configs_insurer_id'), 'scoring_configs', ['insurer_id'], unique=True)

    if 'score_requests' not in table_names:
        op.create_table(
            'score_requests',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('insurer_id', sa.String(), nullable=False),
            sa.Column('request_timestamp', sa.DateTime(), nullable=True),
            sa.Column('safety_score', sa.Float(), nullable=False),
            sa.Column('pd_12m', sa.Float(), nullable=False),
            sa.Column('decision', sa.String(), nullable=False),
            sa.Column('components', sa.JSON(), nullable=False),
            sa.Column('explanations', sa.JSON(), nullable=False),
            sa.Column('profile_snapshot', sa.JSON(), nullable=False),
            sa.Column('config_snapshot', sa.JSON(), nullable=False),
        )
        op.create_index(op.f('ix_score_requests_insurer_id'), 'score_requests', ['insurer_id'], unique=False)
        op.create_index(op.f('ix_score_requests_request_timestamp'), 'score_requests', ['request_timestamp'], unique=False)
        op.create_index('idx_score_requests_insurer_time', 'score_requests', ['insurer_id', 'request_timestamp'], unique=False)

    if 'audit_log' not in table_names:
        op.create_table(
            'audit_log',
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('event_type', sa.String(), nullable=False),
            sa.Column('insurer_id', sa.String(), nullable=True),
            sa.Column('timestamp', sa.DateTime(), nullable=True),
            sa.Column('request_payload', sa.JSON(), nullable=True),
            sa.Column('response_payload', sa.JSON(), nullable=True),
        )
        op.create_index(op.f('ix_audit_log_insurer_id'), 'audit_log', ['insurer_id'], unique=False)
        op.create_index(op.f('ix_audit_log_timestamp'), 'audit_log', ['timestamp'], unique=False)

    if 'quotes' not in table_names:
        op.create_table(
            'quotes',
            sa.Column('id', sa.String(), primary_key=True),
            sa.Column('insurer_id', sa.String(), nullable=False),
            sa.Column('rent_amount', sa.Float(), nullable=False),
            sa.Column('risk_factor', sa.String(), nullable=False),
            sa.Column('coverage_level', sa.String(), nullable=False),
            sa.Column('monthly_premium', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
        )
        op.create_index(op.f('ix_quotes_insurer_id'), 'quotes', ['insurer_id'], unique=False)
        op.create_index(op.f('ix_quotes_created_at'), 'quotes', ['created_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_quotes_created_at'), table_name='quotes')
    op.drop_index(op.f('ix_quotes_insurer_id'), table_name='quotes')
    op.drop_table('quotes')

    op.drop_index(op.f('ix_audit_log_timestamp'), table_name='audit_log')
    op.drop_index(op.f('ix_audit_log_insurer_id'), table_name='audit_log')
    op.drop_table('audit_log')

    op.drop_index('idx_score_requests_insurer_time', table_name='score_requests')
    op.drop_index(op.f('ix_score_requests_request_timestamp'), table_name='score_requests')
    op.drop_index(op.f('ix_score_requests_insurer_id'), table_name='score_requests')
    op.drop_table('score_requests')

    op.drop_index(op.f('ix_scoring_configs_insurer_id'), table_name='scoring_configs')
    op.drop_index(op.f('ix_scoring_configs_id'), table_name='scoring_configs')
    op.drop_table('scoring_configs')

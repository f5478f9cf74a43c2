"""Create users and rewards tables"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9a1c2d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='intern'),
        sa.Column('referral_code', sa.String(length=64), nullable=False),
        sa.Column('referred_by', sa.Integer(), nullable=True),
        sa.Column('total_donations', sa.Numeric(precision=18, scale=2), nullable=False, server_default=sa.text('0.00')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['referred_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('referral_code'),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index('ix_users_role', ['role'], unique=False)
        batch_op.create_index('ix_users_referred_by', ['referred_by'], unique=False)
        batch_op.create_index('idx_user_active_donations', ['is_active', 'total_donations'], unique=False)

    op.create_table(
        'rewards',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=80), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('unlocked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'name', name='uq_rewards_user_name'),
    )
    with op.batch_alter_table('rewards', schema=None) as batch_op:
        batch_op.create_index('ix_rewards_user_id', ['user_id'], unique=False)


def downgrade():
    with op.batch_alter_table('rewards', schema=None) as batch_op:
        batch_op.drop_index('ix_rewards_user_id')
    op.drop_table('rewards')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index('idx_user_active_donations')
        batch_op.drop_index('ix_users_referred_by')
        batch_op.drop_index('ix_users_role')
    op.drop_table('users')

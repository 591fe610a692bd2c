"""seed development data

Revision ID: 9c4d2e6b1f05
Revises: 3b8e1f0c2a7d
Create Date: 2024-01-01 00:00:02.000000

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '9c4d2e6b1f05'
down_revision: Union[str, None] = '3b8e1f0c2a7d'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO users (name, email, enabled) VALUES
            ('Alice Johnson', 'alice@example.com', true),
            ('Bob Smith', 'bob@example.com', true),
            ('Charlie Brown', 'charlie@example.com', false)
        ON CONFLICT (email) DO NOTHING
    """)

    op.execute("""
        INSERT INTO feature_flags (key, description, enabled) VALUES
            ('dark_mode', 'Enable dark mode interface', true),
            ('beta_features', 'Access to beta features', false),
            ('premium_content', 'Access to premium content', true),
            ('analytics_tracking', 'Enable analytics tracking', true)
        ON CONFLICT (key) DO NOTHING
    """)

    op.execute("""
        INSERT INTO user_feature_flags (user_id, feature_flag_id)
        SELECT u.id, f.id
        FROM users u, feature_flags f
        WHERE u.email = 'alice@example.com' AND f.key IN ('dark_mode', 'premium_content')
        ON CONFLICT DO NOTHING
    """)

    op.execute("""
        INSERT INTO user_feature_flags (user_id, feature_flag_id)
        SELECT u.id, f.id
        FROM users u, feature_flags f
        WHERE u.email = 'bob@example.com' AND f.key IN ('beta_features')
        ON CONFLICT DO NOTHING
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM users
        WHERE email IN ('alice@example.com', 'bob@example.com', 'charlie@example.com')
    """)
    op.execute("""
        DELETE FROM feature_flags
        WHERE key IN ('dark_mode', 'beta_features', 'premium_content', 'analytics_tracking')
    """)

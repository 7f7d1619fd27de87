"""007: seed initial data

Revision ID: 007
Revises: 006
Create Date: 2026-10-19

Local-dev accounts (password for all three: Passw0rd!):
  admin@example.com   role=admin
  seller@example.com  role=user
  buyer@example.com   role=user
"""

from typing import Sequence, Union

from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO users (email, password_hash, role) VALUES
            ('admin@example.com',  crypt('Passw0rd!', gen_salt('bf')), 'admin'),
            ('seller@example.com', crypt('Passw0rd!', gen_salt('bf')), 'user'),
            ('buyer@example.com',  crypt('Passw0rd!', gen_salt('bf')), 'user');
    """)
    op.execute("""
        INSERT INTO listings (title, price, status, seller_id)
        SELECT t.title, t.price, 'Active', u.id
        FROM users u
        CROSS JOIN (VALUES
            ('Vintage film camera', 12000),
            ('Road bike helmet', 3500),
            ('Paperback novel set', 800)
        ) AS t (title, price)
        WHERE u.email = 'seller@example.com';
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM listings
        WHERE seller_id = (SELECT id FROM users WHERE email = 'seller@example.com');
    """)
    op.execute("""
        DELETE FROM users
        WHERE email IN ('admin@example.com', 'seller@example.com', 'buyer@example.com');
    """)

#!/usr/bin/env python
"""Seed script to create the initial system admin.

Users are normally provisioned by the identity provider. This script creates
the first ADMIN user directly in the database and prints a bearer token for
it, so the API can be exercised right after setup.

Usage:
    python backend/scripts/seed_admin.py

Environment Variables:
    DATABASE_URL: Database connection string
    JWT_SECRET: Token signing key (must match the API)
    ADMIN_EMAIL: Email for admin user (default: admin@example.com)
    ADMIN_NAME: Display name for admin user (default: System Administrator)
"""

import os
import sys

from lexvault.auth.jwt import create_access_token
from lexvault.auth.roles import UserRole
from lexvault.database import get_db_session
from lexvault.models.user import User


def main():
    """Create initial admin user."""
    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").lower()
    admin_name = os.getenv("ADMIN_NAME", "System Administrator")

    with get_db_session() as session:
        existing = session.query(User).filter(User.email == admin_email).first()
        if existing:
            print(f"ERROR: User {admin_email} already exists")
            sys.exit(1)

        admin = User(
            email=admin_email,
            name=admin_name,
            role=UserRole.ADMIN.value,
            status="ACTIVE",
        )
        session.add(admin)
        session.flush()
        admin_id = admin.id

    token = create_access_token(admin_id, UserRole.ADMIN.value, admin_email)

    print("Admin user created successfully")
    print(f"  ID:    {admin_id}")
    print(f"  Email: {admin_email}")
    print(f"  Token: {token}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python
"""Create the Pitchside tables and optionally bootstrap the first admin.

Roles live in our own user_roles table, so a fresh database has nobody
who can grant them. Pass the auth-provider user id (the token's 'sub') of
the first admin with --admin.

Usage:
    python init_db.py
    python init_db.py --admin 3f2c...-user-id
    python init_db.py --reset        # drops every table first (dev only)
"""

import argparse
import os
import sys

from pitchside import create_app, db
from pitchside.models import UserRole, ROLE_ADMIN


def grant_admin(user_id):
    """Give user_id the admin role unless it already has it."""
    if ROLE_ADMIN in UserRole.roles_for(user_id):
        print(f"  = {user_id} is already an admin")
        return
    db.session.add(UserRole(user_id=user_id, role=ROLE_ADMIN, granted_by='init_db'))
    db.session.commit()
    print(f"  + granted admin to {user_id}")


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--admin', metavar='USER_ID', help='grant the admin role to this user id')
    parser.add_argument('--reset', action='store_true', help='drop all tables before creating them')
    args = parser.parse_args()

    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    with app.app_context():
        print(f"Database: {app.config['SQLALCHEMY_DATABASE_URI']} ({config_name})")

        if args.reset:
            if config_name == 'production':
                print("Refusing to --reset a production database")
                return 1
            db.drop_all()
            print("  - dropped all tables")

        try:
            db.create_all()
        except Exception as e:
            db.session.rollback()
            print(f"❌ Could not create tables: {e}")
            return 1

        for table in db.metadata.sorted_tables:
            print(f"  ✓ {table.name}")

        if args.admin:
            grant_admin(args.admin)

    return 0


if __name__ == '__main__':
    sys.exit(main())

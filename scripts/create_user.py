#!/usr/bin/env python3
"""
Create an account from the command line.

Admins cannot self-register through the API, so they are created here.
Usage: python scripts/create_user.py admin@example.com 'a-long-password' --role admin --name "Site Admin"
"""
import argparse
import sys

from marketplace.db.database import get_db_session, init_db
from marketplace.schemas.schemas import UserRole
from marketplace.services.user_service import EmailTakenError, create_user


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a marketplace account")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--role", choices=[role.value for role in UserRole], default=UserRole.admin.value)
    parser.add_argument("--name", default=None)
    args = parser.parse_args(argv)

    if len(args.password) < 8:
        parser.error("password must be at least 8 characters")

    init_db()
    try:
        with get_db_session() as db:
            user_id = create_user(db, email=args.email, password=args.password, name=args.name, role=args.role)
    except EmailTakenError:
        print(f"User {args.email} already exists", file=sys.stderr)
        return 1

    print(f"Created {args.role} {args.email} ({user_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())

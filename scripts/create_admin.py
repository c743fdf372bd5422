#!/usr/bin/env python3
"""
Create Admin Script

Provisions a dashboard account with admin claims and a matching admin
profile. If the email already exists the password is reset and the
profile is merged.

Reads database URL from DATABASE_URL or the POSTGRES_* env vars.

Usage:
  python scripts/create_admin.py <email> <password> [role] [display_name]

Roles: super_admin, admin, librarian (default: super_admin)
"""
from __future__ import annotations

import argparse
import sys

from libadmin.db.database import SessionLocal
from libadmin.services.admin_user_service import AdminUserError, AdminUserService
from libadmin.utils.role_permissions import ALLOWED_ROLES, ROLE_SUPER_ADMIN, get_role_permissions


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or reset a library admin account")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("role", nargs="?", default=ROLE_SUPER_ADMIN, choices=sorted(ALLOWED_ROLES))
    parser.add_argument("display_name", nargs="?", default="")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    if len(args.password) < 6:
        print("Password must be at least 6 characters", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        result = AdminUserService(db).provision_admin_user(
            email=args.email.strip(),
            password=args.password,
            role=args.role,
            display_name=args.display_name or args.email.split("@")[0],
            created_by="script",
        )
    except AdminUserError as e:
        print(f"Error ({e.code}): {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print("Admin user ready")
    print(f"  uid:   {result['uid']}")
    print(f"  email: {result['email']}")
    print(f"  role:  {result['role']}")
    granted = [k for k, v in get_role_permissions(result['role']).items() if v]
    print(f"  permissions: {', '.join(granted)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

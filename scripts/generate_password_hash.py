#!/usr/bin/env python
"""
Gera o hash bcrypt de uma senha e o SQL para gravá-lo em admin_users.
"""
import argparse
import getpass
import sys

from ebbb_admin.auth.password_handler import get_password_hash
from ebbb_admin.core.config import settings


def build_update_sql(username: str, password_hash: str, table: str = settings.ADMIN_USERS_TABLE) -> str:
    safe_username = username.replace("'", "''")
    return f"UPDATE {table} SET password_hash = '{password_hash}' WHERE username = '{safe_username}';"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate a bcrypt hash for an admin password")
    parser.add_argument("--username", default="admin", help="admin username used in the generated SQL")
    parser.add_argument("--password", help="plaintext password (prompted when omitted)")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        print(f"Password must have at least {settings.PASSWORD_MIN_LENGTH} characters", file=sys.stderr)
        return 1

    password_hash = get_password_hash(password)
    print("Hash:", password_hash)
    print("\nSQL to update admin user:")
    print(build_update_sql(args.username, password_hash))
    return 0


if __name__ == "__main__":
    sys.exit(main())

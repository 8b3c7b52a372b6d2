#!/usr/bin/env python3
"""
Issue a login token for an existing user without their password.

Useful for scripts and integrations that need to call mutations.  The
token is signed with ``SECRET_KEY`` from the environment, so run this
with the same environment as the server.

Usage:
    python create_token.py --db ./library_api/library.db --username alice [--days 365]

Relative ``--db`` paths are resolved against the working directory.
"""

import argparse
import os
import sys

from library_api.app.core.db import SQLiteGateway, get_database_path
from library_api.app.core.security import create_access_token


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Issue a Library API token for a user.")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--username", required=True, help="Username to issue the token for")
    ap.add_argument("--days", type=int, default=0, help="Token lifetime in days (0 = no expiry)")
    args = ap.parse_args(argv)

    db_path = os.path.abspath(args.db) if args.db else get_database_path()
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        return 1

    gateway = SQLiteGateway(db_path)
    user = gateway.find_one("users", {"username": args.username})
    if user is None:
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        return 2

    token = create_access_token(
        {"username": user["username"], "id": user["id"]},
        expires_delta=args.days * 24 * 60 * 60,
    )
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())

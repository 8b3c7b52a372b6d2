#!/usr/bin/env python3
"""
Set a user's password in the Library API SQLite database.

This script does not read or reveal any existing password.  It stores
a new PBKDF2-HMAC-SHA256 hash (format "salthex$hashhex") for the user;
from then on the user logs in with that password instead of the
shared one.

Usage:
    python reset_password.py --db ./library_api/library.db --username alice --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from library_api.app.core.db import SQLiteGateway
from library_api.app.core.errors import PersistenceError
from library_api.app.core.security import hash_password


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Library API user password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./library_api/library.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    gateway = SQLiteGateway(os.path.abspath(args.db))
    user = gateway.find_one("users", {"username": args.username})
    if user is None:
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        return 2

    try:
        gateway.update("users", user["id"], {"password": hash_password(new_password)})
    except PersistenceError as exc:
        print(f"[!] Could not update password: {exc}", file=sys.stderr)
        return 1
    print(f"[+] Password updated for user: {args.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Provision a task owner and print a bearer token for them.

The script applies pending migrations, creates the user if the e‑mail
is unknown and prints a signed access token on stdout.  It uses the
same ``DATABASE_URL`` and ``SECRET_KEY`` environment variables as the
API, so the token is accepted by a server started with the same
configuration.

Usage:
    python create_token.py --email alice@example.com --days 365
    python create_token.py --email alice@example.com --disable
"""

import argparse
import asyncio
import sys

from task_tracker_api.app.core.db import init_db
from task_tracker_api.app.core.security import create_access_token
from task_tracker_api.app.services.user_service import UserService


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Issue a Task Tracker API access token.")
    ap.add_argument("--email", required=True, help="E-mail of the user the token is issued for")
    ap.add_argument("--full-name", help="Full name stored when the user is created")
    ap.add_argument("--days", type=int, default=None, help="Token lifetime in days (default: server setting)")
    group = ap.add_mutually_exclusive_group()
    group.add_argument("--disable", action="store_true", help="Disable the account instead of issuing a token")
    group.add_argument("--enable", action="store_true", help="Re-enable a disabled account before issuing a token")
    return ap


async def run(args: argparse.Namespace) -> int:
    init_db()
    user = await UserService.get_or_create_user(args.email, args.full_name)
    if args.disable:
        await UserService.set_disabled(user.id, True)
        print(f"[+] Disabled user: {user.email}")
        return 0
    if args.enable:
        await UserService.set_disabled(user.id, False)
    elif user.disabled:
        print(f"[!] User {user.email} is disabled; pass --enable to re-enable it.", file=sys.stderr)
        return 2
    expires = args.days * 24 * 60 * 60 if args.days else None
    print(create_access_token({"sub": user.email}, expires_delta=expires))
    return 0


def main() -> None:
    args = build_parser().parse_args()
    if args.days is not None and args.days <= 0:
        print("[!] --days must be positive.", file=sys.stderr)
        sys.exit(1)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
# =============================================================================
# scripts/manage_admins.py - Admin Account Maintenance
# =============================================================================
# Creates, updates and resets admin accounts directly in the data store.
# Needs the same .env as the API, with SUPABASE_SERVICE_KEY set (admin rows
# are not writable with the anon key).
#
# Usage:
#   # Create the admin, or update its password and name if it exists
#   python scripts/manage_admins.py setup admin@interplast.pe --name "Administrador"
#
#   # Delete every admin, then create the listed accounts
#   python scripts/manage_admins.py reset admin@interplast.pe backup@interplast.pe
#
# Passwords are prompted for; press Enter to generate a random one.
# =============================================================================

import argparse
import getpass
import os
import secrets
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.auth.passwords import DEFAULT_ROUNDS, RESET_ROUNDS, PasswordHasher
from app.config import settings
from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_email, normalize_email

MIN_PASSWORD_LENGTH = 8

# Matches every row: PostgREST deletes need a filter
NIL_UUID = "00000000-0000-0000-0000-000000000000"


def ask_password(email: str) -> str:
    """Prompt for a password (twice). Empty input generates one."""
    while True:
        password = getpass.getpass(f"Password for {email} (Enter to generate): ")
        if not password:
            return secrets.token_urlsafe(18)
        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"  Password must be at least {MIN_PASSWORD_LENGTH} characters")
            continue
        if getpass.getpass("Repeat password: ") != password:
            print("  Passwords do not match")
            continue
        return password


def setup_admin(email: str, password: str, name: str) -> str:
    """Create the admin or update its password and name. Returns "created"/"updated"."""
    client = SupabaseClient.get_client()
    hashed = PasswordHasher.hash(password, DEFAULT_ROUNDS)

    existing = SupabaseClient.run_single(
        client.table("admins").select("id").eq("email", email).single(),
        "find admin",
    )
    if existing:
        SupabaseClient.run(
            client.table("admins").update({"password": hashed, "name": name}).eq("email", email),
            "update admin",
        )
        return "updated"

    SupabaseClient.run(
        client.table("admins").insert({"email": email, "password": hashed, "name": name}),
        "create admin",
    )
    return "created"


def reset_admins(accounts: list[tuple[str, str, str]]) -> list[str]:
    """Delete all admins, then create (email, password, name) accounts. Returns emails that failed."""
    client = SupabaseClient.get_client()
    SupabaseClient.run(
        client.table("admins").delete().neq("id", NIL_UUID),
        "delete admins",
    )

    failed = []
    for email, password, name in accounts:
        try:
            SupabaseClient.run(
                client.table("admins").insert({
                    "email": email,
                    "password": PasswordHasher.hash(password, RESET_ROUNDS),
                    "name": name,
                }),
                "create admin",
            )
            print(f"    {name} <{email}> created")
        except Exception as e:
            print(f"    Error creating {email}: {e}")
            failed.append(email)
    return failed


def _emails(values: list[str]) -> list[str]:
    emails = [normalize_email(v) for v in values]
    bad = [e for e in emails if not is_valid_email(e)]
    if bad:
        sys.exit(f"Invalid email: {', '.join(bad)}")
    return emails


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage catalog admin accounts")
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="Create or update one admin")
    setup.add_argument("email")
    setup.add_argument("--name", default="Administrador")

    reset = sub.add_parser("reset", help="Delete all admins and create new ones")
    reset.add_argument("emails", nargs="+")
    reset.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    args = parser.parse_args(argv)

    if not settings.SUPABASE_SERVICE_KEY:
        print("Warning: SUPABASE_SERVICE_KEY is not set; writes may be rejected")

    if args.command == "setup":
        [email] = _emails([args.email])
        password = ask_password(email)
        result = setup_admin(email, password, args.name)
        print(f"Admin {result}")
        print(f"  Email:    {email}")
        print(f"  Password: {password}")
        return 0

    emails = _emails(args.emails)
    if not args.yes:
        answer = input(f"Delete ALL admin accounts and create {len(emails)} new one(s)? [y/N] ")
        if answer.strip().lower() != "y":
            print("Aborted")
            return 1

    accounts = []
    for index, email in enumerate(emails):
        name = "Administrador Principal" if index == 0 else f"Administrador Backup {index}"
        accounts.append((email, ask_password(email), name))

    print("=" * 50)
    print("Resetting admin accounts")
    print("=" * 50)
    failed = reset_admins(accounts)

    print("\nNew credentials (store them somewhere safe):")
    for email, password, name in accounts:
        if email not in failed:
            print(f"  {name}: {email} / {password}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

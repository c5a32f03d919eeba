#!/usr/bin/env python3
"""
Setup Admin User Script.

Creates the first administrator so the dashboard can be logged into on a
blank database. An existing account with the same email is promoted to
admin and its password reset.

Usage:
    python auto/setup_admin.py
    python auto/setup_admin.py --email admin@example.com --password Secret123

Environment Variables:
    ADMIN_EMAIL: Admin email (default: admin@example.com)
    ADMIN_PASSWORD: Admin password (default: auto-generated)
    ADMIN_NAME: Display name (default: Admin User)
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from dataclasses import dataclass
from os import environ
from pathlib import Path
from secrets import token_urlsafe
from sys import exit as sys_exit
from sys import path as sys_path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys_path.insert(0, str(project_root))

from blogcms.context import AppContext  # noqa: E402
from blogcms.errors import BaseAppError  # noqa: E402
from blogcms.services import UserService  # noqa: E402


@dataclass(frozen=True)
class AdminUserData:
    """
    Admin user creation data.

    Attributes
    ----------
    name : str
        Display name.
    email : str
        Login email.
    password : str
        Plain password, hashed before storage.
    auto_generated : bool
        Whether the password was generated by this script.
    """

    name: str
    email: str
    password: str
    auto_generated: bool = False


def generate_secure_password(length: int = 16) -> str:
    """Generate a random password of roughly ``length`` characters."""
    return token_urlsafe(length)[:length]


def gather_input(args: Namespace) -> AdminUserData:
    password = args.password or environ.get("ADMIN_PASSWORD")
    return AdminUserData(
        name=args.name or environ.get("ADMIN_NAME", "Admin User"),
        email=args.email or environ.get("ADMIN_EMAIL", "admin@example.com"),
        password=password or generate_secure_password(),
        auto_generated=password is None,
    )


async def setup_admin(data: AdminUserData) -> int:
    context = AppContext.create()
    await context.startup()
    try:
        admin, created = await UserService(context).ensure_admin(data.name, data.email, data.password)
    except BaseAppError as e:
        print(f"❌ Could not set up admin: {e.detail}")
        return 1
    finally:
        await context.shutdown()

    print("=" * 60)
    print("✅ Admin user created" if created else "✅ Existing user promoted to admin")
    print("=" * 60)
    print(f"   ID:    {admin.id}")
    print(f"   Email: {admin.email}")
    print(f"   Role:  {admin.role}")
    if data.auto_generated:
        print(f"   Password: {data.password}")
        print("\n⚠️  NOTE: This password was auto-generated. Save it now!")
    return 0


def main() -> None:
    parser = ArgumentParser(
        description="Create or promote the dashboard administrator",
        formatter_class=RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--email", help="Admin email")
    parser.add_argument("--password", help="Admin password (generated when omitted)")
    parser.add_argument("--name", help="Admin display name")
    args = parser.parse_args()

    sys_exit(asyncio_run(setup_admin(gather_input(args))))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Submit Published Posts To The Indexing API.

Usage:
    python auto/submit_posts.py
    python auto/submit_posts.py --limit 50
    python auto/submit_posts.py --updated-since 2024-01-01

URLs are submitted one at a time with a short pause in between; a
rate-limited or failed URL is reported and skipped.
"""

from argparse import ArgumentParser, ArgumentTypeError
from asyncio import run as asyncio_run
from datetime import UTC, datetime
from pathlib import Path
from sys import exit as sys_exit
from sys import path as sys_path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys_path.insert(0, str(project_root))

from blogcms.context import AppContext  # noqa: E402
from blogcms.errors import DatabaseError  # noqa: E402
from blogcms.services import PostService  # noqa: E402

DEFAULT_LIMIT = 10000


def parse_date(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        mssg = f"Invalid date: {value}. Use YYYY-MM-DD."
        raise ArgumentTypeError(mssg) from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


async def submit_posts(limit: int, updated_since: datetime | None) -> int:
    context = AppContext.create()
    await context.startup()
    try:
        if not context.indexing.configured:
            print("❌ GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY must be set")
            return 1
        try:
            urls = await PostService(context).published_urls(updated_since, limit)
        except DatabaseError as e:
            print(f"❌ Could not load posts: {e.detail}")
            return 1

        if updated_since:
            print(f"📅 Filtering posts updated since: {updated_since.isoformat()}")
        print(f"📝 Found {len(urls)} published posts")
        if not urls:
            return 0

        print("⏳ This may take a while (the API is rate limited)...\n")
        submitted = await context.indexing.submit_urls(urls)
        print(f"\n✅ Submitted {submitted} of {len(urls)} URLs")
        return 0
    finally:
        await context.shutdown()


def main() -> None:
    parser = ArgumentParser(description="Submit published post URLs for indexing")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Maximum number of posts")
    parser.add_argument("--updated-since", type=parse_date, default=None, help="YYYY-MM-DD")
    args = parser.parse_args()

    sys_exit(asyncio_run(submit_posts(args.limit, args.updated_since)))


if __name__ == "__main__":
    main()

"""Entry point: reads marketplace commands from standard input."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from cloudshop.cli import CommandFactory, parse_line
from cloudshop.repository import (
    CategoryRepository,
    ListingRepository,
    RepositoryError,
    UserRepository,
    init_db,
)
from cloudshop.service import CategoryService, ListingService, UserService

DB_PATH = Path("resources") / "cloudshop.db"
ENV_PATH = Path(".env")


def _start_index() -> int:
    try:
        return int(os.environ.get("START_IDX", ""))
    except ValueError:
        return 0


def _strip_newline(raw: str) -> str:
    line = raw[:-1] if raw.endswith("\n") else raw
    return line[:-1] if line.endswith("\r") else line


def main(argv: list[str] | None = None) -> int:
    """Run the command loop over standard input."""
    parser = argparse.ArgumentParser(
        prog="cloudshop",
        description="Marketplace that reads one command per line from standard input.",
    )
    parser.parse_args(argv)

    if not ENV_PATH.is_file():
        print("Error loading .env file")
        return 1
    load_dotenv(ENV_PATH, override=False)

    try:
        conn = init_db(DB_PATH)
    except RepositoryError as exc:
        print("Failed to initialize database:", exc)
        return 1

    try:
        user_repo = UserRepository(conn)
        listing_repo = ListingRepository(conn, _start_index())
        category_repo = CategoryRepository(conn)

        user_service = UserService(user_repo)
        factory = CommandFactory(
            user_service,
            ListingService(listing_repo, category_repo, user_service),
            CategoryService(category_repo, user_service),
        )

        try:
            for raw in sys.stdin:
                line = _strip_newline(raw)
                if not line:
                    continue
                command = factory.create_command(parse_line(line))
                if command is None:
                    print("Invalid command or arguments")
                    continue
                command.execute()
        except OSError as exc:
            print("Error reading from input:", exc, file=sys.stderr)
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
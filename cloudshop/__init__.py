"""A command-line marketplace for users, listings and categories, stored in SQLite."""

__version__ = "0.1.0"
"""Core marketplace entities: users, listings and categories."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime

# Reference-time tokens, longest first so that e.g. "January" wins over "Jan".
_LAYOUT_TOKENS = {
    "January": "%B",
    "Jan": "%b",
    "Monday": "%A",
    "Mon": "%a",
    "MST": "%Z",
    "2006": "%Y",
    "-0700": "%z",
    ".000000": ".%f",
    "15": "%H",
    "01": "%m",
    "02": "%d",
    "03": "%I",
    "04": "%M",
    "05": "%S",
    "06": "%y",
    "PM": "%p",
}

_LAYOUT_PATTERN = re.compile(
    "|".join(re.escape(token) for token in _LAYOUT_TOKENS) + "|%"
)


def go_layout_to_strftime(layout: str) -> str:
    """Convert a reference-time layout ("2006-01-02 15:04:05") to a strftime format."""

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "%":
            return "%%"
        return _LAYOUT_TOKENS[token]

    return _LAYOUT_PATTERN.sub(_replace, layout)


@dataclass
class Category:
    """A grouping of listings, with the number of listings it holds."""

    name: str
    count: int = 0

    @classmethod
    def new(cls, name: str) -> Category:
        """Create an empty category with a lower-cased name."""
        return cls(name=name.lower(), count=0)


@dataclass
class Listing:
    """An item put up for sale by one user in one category."""

    title: str
    description: str
    price: int
    username: str
    creation_time: str
    category: str

    @classmethod
    def new(
        cls,
        title: str,
        description: str,
        price: int,
        username: str,
        category: str,
    ) -> Listing:
        """Create a listing stamped with the current time in INPUT_TIME_FORMAT."""
        layout = os.environ.get("INPUT_TIME_FORMAT", "")
        return cls(
            title=title,
            description=description,
            price=price,
            username=username.lower(),
            creation_time=datetime.now().strftime(go_layout_to_strftime(layout)),
            category=category,
        )


@dataclass
class User:
    """A registered marketplace user."""

    username: str

    @classmethod
    def new(cls, username: str) -> User:
        """Create a user with a lower-cased name."""
        return cls(username=username.lower())
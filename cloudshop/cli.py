"""Command-line parsing and the marketplace commands."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from cloudshop.domain import Listing
from cloudshop.service import CategoryService, ListingService, ServiceError, UserService

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_line(line: str) -> list[str]:
    """Split a line on spaces, keeping quoted runs together and dropping the quotes."""
    args: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == " " and not in_quotes:
            if current:
                args.append("".join(current))
                current = []
            continue
        if char in "'\"":
            in_quotes = not in_quotes
            continue
        current.append(char)
    if current:
        args.append("".join(current))
    return args


def trim_quotes(s: str) -> str:
    """Strip one pair of matching surrounding quotes."""
    if len(s) >= 2 and s[0] == s[-1] and s[0] in "'\"":
        return s[1:-1]
    return s


def _parse_int(text: str) -> int | None:
    if not _INT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def _format_listing(listing: Listing) -> str:
    return "|".join(
        str(field)
        for field in (
            listing.title,
            listing.description,
            listing.price,
            listing.creation_time,
            listing.category,
            listing.username,
        )
    )


class Command(ABC):
    """A parsed command that prints its result when executed."""

    @abstractmethod
    def execute(self) -> None:
        """Run the command and print its response."""


@dataclass
class RegisterCommand(Command):
    user_service: UserService
    username: str

    def execute(self) -> None:
        if self.user_service.register(self.username):
            print("Success")
        else:
            print("Error - user already existing")


@dataclass
class CreateListingCommand(Command):
    listing_service: ListingService
    username: str
    title: str
    description: str
    price: int
    category: str

    def execute(self) -> None:
        try:
            listing_id = self.listing_service.create_listing(
                self.username, self.title, self.description, self.price, self.category
            )
        except ServiceError as exc:
            print(exc)
        else:
            print(listing_id)


@dataclass
class DeleteListingCommand(Command):
    listing_service: ListingService
    username: str
    listing_id: int

    def execute(self) -> None:
        try:
            self.listing_service.delete_listing(self.username, self.listing_id)
        except ServiceError as exc:
            print(exc)
        else:
            print("Success")


@dataclass
class GetListingCommand(Command):
    listing_service: ListingService
    username: str
    listing_id: int

    def execute(self) -> None:
        try:
            listing = self.listing_service.get_listing(self.username, self.listing_id)
        except ServiceError as exc:
            print(exc)
        else:
            print(_format_listing(listing))


@dataclass
class GetCategoryCommand(Command):
    listing_service: ListingService
    username: str
    category: str

    def execute(self) -> None:
        try:
            listings = self.listing_service.get_by_category(self.username, self.category)
        except ServiceError as exc:
            print(exc)
        else:
            for listing in listings:
                print(_format_listing(listing))


@dataclass
class GetTopCategoryCommand(Command):
    category_service: CategoryService
    username: str

    def execute(self) -> None:
        try:
            categories = self.category_service.get_top_category(self.username)
        except ServiceError as exc:
            print(exc)
        else:
            for name in categories:
                print(name)


@dataclass
class CommandFactory:
    """Builds commands from parsed argument lists."""

    user_service: UserService
    listing_service: ListingService
    category_service: CategoryService

    def create_command(self, args: list[str]) -> Command | None:
        """Return the command for args, or None if they are invalid."""
        match list(args):
            case ["REGISTER", username]:
                return RegisterCommand(self.user_service, username)
            case ["CREATE_LISTING", username, title, description, price_text, category]:
                price = _parse_int(price_text)
                if price is None:
                    return None
                return CreateListingCommand(
                    self.listing_service,
                    username,
                    trim_quotes(title),
                    trim_quotes(description),
                    price,
                    trim_quotes(category),
                )
            case ["DELETE_LISTING", username, id_text]:
                listing_id = _parse_int(id_text)
                if listing_id is None:
                    return None
                return DeleteListingCommand(self.listing_service, username, listing_id)
            case ["GET_LISTING", username, id_text]:
                listing_id = _parse_int(id_text)
                if listing_id is None:
                    return None
                return GetListingCommand(self.listing_service, username, listing_id)
            case ["GET_CATEGORY", username, category]:
                return GetCategoryCommand(
                    self.listing_service, username, trim_quotes(category)
                )
            case ["GET_TOP_CATEGORY", username]:
                return GetTopCategoryCommand(self.category_service, username)
        return None
"""Business rules for registering users and managing listings."""

from __future__ import annotations

from cloudshop.domain import Category, Listing, User
from cloudshop.repository import (
    CategoryNotFoundError,
    CategoryRepository,
    ListingRepository,
    RepositoryError,
    UserRepository,
)

_UNKNOWN_USER = "Error - unknown user"


class ServiceError(Exception):
    """Raised when a marketplace operation is refused or fails."""


class UserService:
    """Registration and lookup of marketplace users."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def user_exists(self, username: str) -> bool:
        try:
            self._user_repo.get(username)
        except RepositoryError:
            return False
        return True

    def register(self, username: str) -> bool:
        """Register a user; return False if the name is already taken."""
        if self.user_exists(username):
            return False
        try:
            self._user_repo.create(User(username=username))
        except RepositoryError:
            return False
        return True


class ListingService:
    """Creation, removal and lookup of listings."""

    def __init__(
        self,
        listing_repo: ListingRepository,
        category_repo: CategoryRepository,
        user_service: UserService,
    ) -> None:
        self._listings = listing_repo
        self._categories = category_repo
        self._users = user_service

    def _require_user(self, username: str) -> None:
        if not self._users.user_exists(username):
            raise ServiceError(_UNKNOWN_USER)

    def create_listing(
        self,
        username: str,
        title: str,
        description: str,
        price: int,
        category: str,
    ) -> int:
        """Create a listing and return its id."""
        self._require_user(username)
        listing = Listing.new(title, description, price, username, category)
        try:
            listing_id = self._listings.create(listing)
            self._categories.create(Category(name=category, count=1))
        except RepositoryError as exc:
            raise ServiceError(f"[ERROR] {exc}") from exc
        return listing_id

    def delete_listing(self, username: str, listing_id: int) -> None:
        """Delete a listing owned by username."""
        try:
            listing = self._listings.get(listing_id)
        except RepositoryError as exc:
            raise ServiceError("Error - listing does not exist") from exc
        if listing.username != username:
            raise ServiceError("Error - listing owner mismatch")

        try:
            category = self._categories.get(listing.category)
        except RepositoryError as exc:
            raise ServiceError(str(exc)) from exc
        try:
            if category.count == 1:
                self._categories.remove(listing.category)
            else:
                self._categories.decrement(listing.category)
        except RepositoryError:
            pass

        try:
            self._listings.remove(username, listing_id)
        except RepositoryError as exc:
            raise ServiceError(f"[ERROR] {exc}") from exc

    def get_listing(self, username: str, listing_id: int) -> Listing:
        """Return any listing by id; username only authenticates."""
        self._require_user(username)
        try:
            return self._listings.get(listing_id)
        except RepositoryError as exc:
            raise ServiceError("Error - not found") from exc

    def get_by_category(self, username: str, category: str) -> list[Listing]:
        """Return the category's listings, newest first."""
        self._require_user(username)
        try:
            self._categories.get(category)
        except CategoryNotFoundError as exc:
            raise ServiceError("Error - category not found") from exc
        except RepositoryError:
            pass
        try:
            return self._listings.by_category(category)
        except RepositoryError as exc:
            raise ServiceError("Error - category not found") from exc


class CategoryService:
    """Queries over category statistics."""

    def __init__(self, category_repo: CategoryRepository, user_service: UserService) -> None:
        self._categories = category_repo
        self._users = user_service

    def get_top_category(self, username: str) -> list[str]:
        """Return the categories with the most listings, in name order."""
        if not self._users.user_exists(username):
            raise ServiceError(_UNKNOWN_USER)
        try:
            return self._categories.top_categories()
        except RepositoryError as exc:
            raise ServiceError(f"[ERROR] failed to get top category: {exc}") from exc
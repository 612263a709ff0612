import pytest

from cloudshop.cli import CommandFactory, parse_line, trim_quotes
from cloudshop.domain import Category, Listing
from cloudshop.repository import (
    CategoryRepository,
    ListingRepository,
    UserRepository,
    init_db,
)
from cloudshop.service import CategoryService, ListingService, UserService

LAYOUT = "2006-01-02 15:04:05"


@pytest.fixture
def factory(tmp_path, monkeypatch):
    monkeypatch.setenv("INPUT_TIME_FORMAT", LAYOUT)
    monkeypatch.setenv("OUTPUT_TIME_FORMAT", LAYOUT)
    conn = init_db(tmp_path / "shop.db")
    users = UserService(UserRepository(conn))
    listing_repo = ListingRepository(conn, 0)
    category_repo = CategoryRepository(conn)
    built = CommandFactory(
        users,
        ListingService(listing_repo, category_repo, users),
        CategoryService(category_repo, users),
    )
    built.listing_repo = listing_repo
    built.category_repo = category_repo
    yield built
    conn.close()


def run(factory, capsys, line):
    command = factory.create_command(parse_line(line))
    assert command is not None
    command.execute()
    return capsys.readouterr().out.splitlines()


def test_parse_line_quoted():
    line = "CREATE_LISTING user1 'Phone model 8' 'Black color, brand new' 1000 'Electronics'"
    assert parse_line(line) == [
        "CREATE_LISTING",
        "user1",
        "Phone model 8",
        "Black color, brand new",
        "1000",
        "Electronics",
    ]


def test_parse_line_spacing_and_quotes():
    assert parse_line("  a   b  ") == ["a", "b"]
    assert parse_line("''") == []
    assert parse_line('a"b c"d') == ["ab cd"]
    assert parse_line("") == []


def test_trim_quotes():
    assert trim_quotes("'x'") == "x"
    assert trim_quotes('"x"') == "x"
    assert trim_quotes("x") == "x"
    assert trim_quotes("'x") == "'x"


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["REGISTER"],
        ["REGISTER", "a", "b"],
        ["UNKNOWN", "a"],
        ["CREATE_LISTING", "u", "t", "d", "abc", "c"],
        ["CREATE_LISTING", "u", "t", "d", "1_000", "c"],
        ["CREATE_LISTING", "u", "t", "d", "99999999999999999999", "c"],
        ["CREATE_LISTING", "u", "t", "d", "5"],
        ["DELETE_LISTING", "u", "x"],
        ["GET_LISTING", "u"],
        ["GET_CATEGORY", "u"],
        ["GET_TOP_CATEGORY"],
    ],
)
def test_invalid_commands(factory, args):
    assert factory.create_command(args) is None


def test_signed_price_accepted(factory):
    command = factory.create_command(["CREATE_LISTING", "u", "t", "d", "+5", "c"])
    assert command.price == 5


def test_register_command(factory, capsys):
    assert run(factory, capsys, "REGISTER user1") == ["Success"]
    assert run(factory, capsys, "REGISTER user1") == ["Error - user already existing"]


def test_create_and_get_listing(factory, capsys):
    run(factory, capsys, "REGISTER user1")
    out = run(
        factory,
        capsys,
        "CREATE_LISTING user1 'Phone model 8' 'Black color, brand new' 1000 'Electronics'",
    )
    listing_id = out[0]
    line = run(factory, capsys, f"GET_LISTING user1 {listing_id}")[0]
    fields = line.split("|")
    assert fields[:3] == ["Phone model 8", "Black color, brand new", "1000"]
    assert fields[4:] == ["Electronics", "user1"]


def test_unknown_user_messages(factory, capsys):
    assert run(factory, capsys, "CREATE_LISTING ghost t d 5 c") == ["Error - unknown user"]
    assert run(factory, capsys, "GET_LISTING ghost 1") == ["Error - unknown user"]
    assert run(factory, capsys, "GET_CATEGORY ghost c") == ["Error - unknown user"]
    assert run(factory, capsys, "GET_TOP_CATEGORY ghost") == ["Error - unknown user"]


def test_get_category_output(factory, capsys):
    run(factory, capsys, "REGISTER user1")
    factory.listing_repo.create(
        Listing("Black shoes", "Training shoes", 100, "user1", "2019-02-22 12:34:57", "Sports")
    )
    factory.listing_repo.create(
        Listing("T-shirt", "White color", 20, "user2", "2019-02-22 12:34:58", "Sports")
    )
    factory.category_repo.create(Category(name="Sports", count=1))
    factory.category_repo.create(Category(name="Sports", count=1))
    assert run(factory, capsys, "GET_CATEGORY user1 'Sports'") == [
        "T-shirt|White color|20|2019-02-22 12:34:58|Sports|user2",
        "Black shoes|Training shoes|100|2019-02-22 12:34:57|Sports|user1",
    ]
    assert run(factory, capsys, "GET_CATEGORY user1 Fashion") == ["Error - category not found"]


def test_delete_and_top_category(factory, capsys):
    run(factory, capsys, "REGISTER user1")
    run(factory, capsys, "REGISTER user2")
    first = run(factory, capsys, "CREATE_LISTING user1 a b 1 Sports")[0]
    run(factory, capsys, "CREATE_LISTING user1 c d 2 Fashion")
    run(factory, capsys, "CREATE_LISTING user2 e f 3 Fashion")
    assert run(factory, capsys, "GET_TOP_CATEGORY user1") == ["Fashion"]
    assert run(factory, capsys, f"DELETE_LISTING user2 {first}") == [
        "Error - listing owner mismatch"
    ]
    assert run(factory, capsys, f"DELETE_LISTING user1 {first}") == ["Success"]
    assert run(factory, capsys, f"DELETE_LISTING user1 {first}") == [
        "Error - listing does not exist"
    ]
    assert run(factory, capsys, f"GET_LISTING user1 {first}") == ["Error - not found"]
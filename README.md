# cloudshop

A small marketplace that runs in the terminal. It reads commands from
standard input one line at a time and prints the answer to each
command. Users, listings and categories are kept in a SQLite database.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

At startup the program needs a `.env` file in the current directory.
If there is none, it prints `Error loading .env file` and exits with
status 1. Values from `.env` do not replace variables already set in
the environment. These variables are read:

- `START_IDX`: a whole number added to the database row ids to make the
  public listing ids. If it is missing or not a number, 0 is used.
- `INPUT_TIME_FORMAT`: the layout used to stamp a new listing with its
  creation time.
- `OUTPUT_TIME_FORMAT`: the layout used to print creation times.

Both time settings are reference-time layouts such as
`2006-01-02 15:04:05`. The tokens understood are `2006`, `06`, `01`,
`02`, `03`, `15`, `04`, `05`, `.000000`, `January`, `Jan`, `Monday`,
`Mon`, `PM`, `MST` and `-0700`; any other text is copied as it is.
`cloudshop.domain.go_layout_to_strftime` turns such a layout into a
`strftime` pattern.

Stored creation times are read back as ISO dates, so `INPUT_TIME_FORMAT`
should produce one, for example `2006-01-02 15:04:05`. A listing whose
stored time cannot be read back answers `Error - not found` to
`GET_LISTING`.

The database file is `resources/cloudshop.db`. The directory is created
if needed, and the file is deleted and created again on every start.

## Usage

```
cloudshop < commands.txt
```

The commands can also be typed directly; there is no prompt. An
argument containing spaces goes in single or double quotes. Empty lines
are skipped. `cloudshop --help` shows a short usage note.

| Command | Answers |
| --- | --- |
| `REGISTER <username>` | `Success`, `Error - user already existing` |
| `CREATE_LISTING <username> <title> <description> <price> <category>` | the new listing id, `Error - unknown user` |
| `DELETE_LISTING <username> <listing_id>` | `Success`, `Error - listing does not exist`, `Error - listing owner mismatch` |
| `GET_LISTING <username> <listing_id>` | `title\|description\|price\|created_at\|category\|username`, `Error - not found`, `Error - unknown user` |
| `GET_CATEGORY <username> <category>` | one line per listing in the same form, newest first; `Error - category not found`, `Error - unknown user` |
| `GET_TOP_CATEGORY <username>` | every category sharing the highest number of listings, one per line in name order; `Error - unknown user` |

Price and listing id must be whole numbers. A line with an unknown
command, the wrong number of arguments, or a price or id that is not a
whole number gets the answer `Invalid command or arguments`.

`GET_LISTING` returns any listing; the username only has to belong to a
registered user. The username stored with a listing is lower-cased, and
`DELETE_LISTING` compares it with the name given, so only the lower-case
owner name can delete a listing.

Example session, with `START_IDX=100000` in `.env`:

```
REGISTER user1
Success
CREATE_LISTING user1 'Phone model 8' 'Black color, brand new' 1000 'Electronics'
100001
GET_TOP_CATEGORY user1
Electronics
```

## Using it from Python

`cloudshop.app.main()` runs the command loop over standard input and
returns the exit status. The parts it is built from can also be used on
their own:

- `cloudshop.domain`: the `User`, `Listing` and `Category` dataclasses
  and `go_layout_to_strftime`.
- `cloudshop.repository`: `init_db(path)` returns a `sqlite3`
  connection with the tables created; `UserRepository`,
  `ListingRepository` (with a `start_idx` offset for ids) and
  `CategoryRepository` work on it. Failures raise `RepositoryError`,
  and a missing category raises `CategoryNotFoundError`.
- `cloudshop.service`: `UserService`, `ListingService` and
  `CategoryService`; refused or failed operations raise `ServiceError`
  with the answer text as its message.
- `cloudshop.cli`: `parse_line`, `trim_quotes`, `CommandFactory` and the
  command classes, each with an `execute()` method that prints its
  answer.

## What it does not do

- Nothing is kept between runs: the database is recreated at every
  start.
- There is no buying, selling or payment; the marketplace only records
  users and listings.
- There is no network server; the only interface is standard input and
  output.
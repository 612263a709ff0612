[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cloudshop"
version = "0.1.0"
description = "A small command-line marketplace for users, listings and categories, stored in SQLite"
requires-python = ">=3.10"
dependencies = [
    "python-dotenv",
]
keywords = ["marketplace", "listings", "sqlite", "cli", "shop"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cloudshop = "cloudshop.app:main"

[tool.hatch.build.targets.wheel]
packages = ["cloudshop"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

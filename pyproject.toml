[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "csvtomt940"
version = "1.0.0"
description = "Convert bank CSV exports (ING, N26) into MT940 statement files"
requires-python = ">=3.10"
dependencies = []
keywords = ["mt940", "sta", "csv", "banking", "swift", "ing", "n26", "accounting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: English",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Accounting",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
csvtomt940 = "csvtomt940.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["csvtomt940"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "commandlijn"
version = "0.0.0"
description = "Command-line look-up of Belgian public transport stops and timetables (De Lijn and SNCB/NMBS)"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["public transport", "timetable", "de lijn", "sncb", "nmbs", "irail", "cli"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
commandlijn = "commandlijn.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["commandlijn"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

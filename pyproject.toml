[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "drtool"
version = "0.1.0"
description = "Scan files for flight-simulator dataref and command names, track their values and search them"
requires-python = ">=3.10"
dependencies = []
keywords = ["dataref", "commandref", "flight-simulator", "search", "scanner"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Debuggers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["drtool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

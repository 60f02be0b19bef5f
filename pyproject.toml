[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ferretwire"
version = "0.1.0"
description = "MongoDB wire protocol messages: OP_MSG, OP_QUERY and OP_REPLY encoding and decoding, with hex dump and test helpers"
requires-python = ">=3.10"
keywords = ["mongodb", "wire-protocol", "bson", "op_msg", "op_query", "op_reply", "hexdump"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pymongo",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ferretwire-version = "ferretwire.version:main"

[tool.hatch.build.targets.wheel]
packages = ["ferretwire"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true

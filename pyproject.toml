[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "resolink"
version = "0.1.0"
description = "An asyncio client and data model for the Resonite Link websocket API."
requires-python = ">=3.10"
keywords = ["resonite", "websocket", "asyncio", "client", "json"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "websockets",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "websockets",
]

[project.scripts]
resolink-read-root = "resolink.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["resolink"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

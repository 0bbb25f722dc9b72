[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "permir"
version = "0.18.1"
description = "Middle end for a permission-typed language: HIR, permission checking, validation and lowering to MIR"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "intermediate-representation", "hir", "mir", "permissions", "aliasing"]
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
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["permir"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

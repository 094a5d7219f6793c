[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minilang"
version = "0.1.0"
description = "Tree-walking evaluator, scoped symbol tables and typed values for a small class-based language"
requires-python = ">=3.10"
dependencies = []
keywords = ["interpreter", "ast", "symbol-table", "language", "evaluator"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["minilang"]

[tool.pytest.ini_options]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tcrtrie"
version = "0.1.0"
description = "Approximate search of T-cell receptor junction sequences with a trie, by edit counts or a substitution matrix"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcr", "airr", "trie", "levenshtein", "immunology", "sequence search"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tcrtrie = "tcrtrie.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tcrtrie"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "concurkit"
version = "0.1.0"
description = "Concurrent data structures and locks: spin, ticket, CLH and MCS locks, sequence locks, lock-free stack, queue and list, and fine-grained list sets."
requires-python = ">=3.10"
dependencies = []
keywords = ["concurrency", "locks", "lock-free", "seqlock", "linked-list", "data-structures"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["concurkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tasklane"
version = "0.1.0"
description = "Thread-based task synchronisation primitives: ordered tickets, object pools, scoped finalizers, plus example programs."
requires-python = ">=3.10"
dependencies = []
keywords = ["concurrency", "threads", "tickets", "pool", "synchronization", "tasks"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tasklane-primes = "tasklane.primes:main"
tasklane-fractal = "tasklane.fractal:main"
tasklane-bench = "tasklane.bench:main"

[tool.hatch.build.targets.wheel]
packages = ["tasklane"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

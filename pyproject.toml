[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "philodine"
version = "0.1.0"
description = "A dining philosophers simulation with a waiter that serves philosophers from a queue"
requires-python = ">=3.10"
dependencies = []
keywords = ["dining philosophers", "concurrency", "threads", "simulation", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
philo = "philodine.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["philodine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dnflock"
version = "0.1.0"
description = "Reduce RPM repository metadata to the packages a build needs, and write lock files and tar header orderings for them"
requires-python = ">=3.10"
dependencies = []
keywords = ["rpm", "dnf", "repository", "lockfile", "dependencies", "build", "elf"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: System :: Software Distribution",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dnflock"]

[tool.pytest.ini_options]
addopts = "-ra"

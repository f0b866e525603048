[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sectorhex"
version = "0.1.0"
description = "Terminal hex editor for raw disk images and block devices, one 512-byte sector at a time"
requires-python = ">=3.10"
dependencies = []
keywords = ["hex", "editor", "sector", "disk", "block-device", "curses"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sectorhex = "sectorhex.app:main"

[tool.hatch.build.targets.wheel]
packages = ["sectorhex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

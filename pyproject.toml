[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "psxcore"
version = "0.1.0"
description = "PlayStation hardware components: cue-sheet CD images, the CD-ROM controller, controller I/O registers and the system control co-processor"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "playstation", "psx", "cue", "cdrom", "mips", "cop0"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["psxcore"]

[tool.pytest.ini_options]
addopts = "-ra"

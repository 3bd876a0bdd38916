[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "videopac"
version = "1.18.0"
description = "Odyssey2 / Videopac emulation components: 8048 CPU core, sound generator, voice unit, key mapping, bitmap drawing and CRC-32 identification"
requires-python = ">=3.10"
dependencies = []
keywords = ["odyssey2", "videopac", "8048", "emulator", "retro"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["videopac"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dabradio"
version = "0.1.0"
description = "Building blocks for decoding DAB and DAB+ digital radio: checksums, Reed-Solomon FEC, packet data and audio component decoders"
requires-python = ">=3.10"
dependencies = []
keywords = ["dab", "dab+", "digital radio", "reed-solomon", "crc", "mpeg audio", "aac", "base64"]
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
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dabradio"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "transportkit"
version = "0.1.0"
description = "MPEG transport stream helpers: packet inspection, PCR handling, packetizing, throughput, timing histograms and TR 101 290 alarm tracking"
requires-python = ">=3.10"
keywords = ["mpeg-ts", "transport-stream", "pcr", "tr101290", "broadcast", "video", "udp", "multicast"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["transportkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

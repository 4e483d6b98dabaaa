[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "threadpair"
version = "0.1.0"
description = "Device pairing, URI resource encoding and SRP lease tracking for Thread home-automation nodes"
requires-python = ">=3.10"
dependencies = []
keywords = ["thread", "coap", "pairing", "home-automation", "srp"]
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
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["threadpair"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

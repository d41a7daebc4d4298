[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "servertestkit"
version = "0.1.0"
description = "Building blocks for testing HTTP servers: transport settings, server configuration, multipart bodies, shared request state and free-port helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["testing", "http", "multipart", "cookies", "ports"]
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
    "Topic :: Software Development :: Testing",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["servertestkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

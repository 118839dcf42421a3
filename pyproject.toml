[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proxywasm"
version = "0.1.0"
description = "Plugin-side SDK for the Proxy-Wasm ABI: host calls, context dispatch, header map encoding and metrics"
requires-python = ">=3.10"
keywords = ["proxy-wasm", "proxy", "envoy", "wasm", "plugin", "sdk"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: Proxy Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["proxywasm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "heliumcore"
version = "0.1.0"
description = "Return codes, wire message layouts and packet plugin chains for a D/TLS based VPN protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["vpn", "dtls", "tunnel", "wire-protocol", "plugins", "networking"]
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
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["heliumcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"

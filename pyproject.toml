[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yab"
version = "0.22.0.dev0"
description = "Transports and payload helpers for making RPC calls to services over HTTP and gRPC"
requires-python = ">=3.10"
keywords = ["rpc", "grpc", "http", "testing", "yarpc", "client"]
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
    "Topic :: Software Development :: Testing",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "pyyaml>=6.0",
    "requests>=2.28",
    "grpcio>=1.50",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "grpcio>=1.50",
]

[tool.hatch.build.targets.wheel]
packages = ["yab"]

[tool.hatch.build.targets.sdist]
include = ["yab", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
ignore_missing_imports = true

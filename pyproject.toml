[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ra_mcp"
version = "0.1.0"
description = "Building blocks for rust-analyzer and cargo tooling: validated cargo invocations and runs, LSP framing, a diagnostics cache and source snippets."
requires-python = ">=3.10"
dependencies = []
keywords = ["rust", "cargo", "rust-analyzer", "lsp", "json-rpc"]
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
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["ra_mcp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"

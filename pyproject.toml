[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sorkinbot"
version = "0.1.0"
description = "Domain core of a clinic appointment chat bot: users, draft appointments, translations, caching and periodic tasks"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat-bot", "appointments", "clinic", "telegram", "state-machine"]
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
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sorkinbot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

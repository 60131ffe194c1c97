[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qqbotplugins"
version = "0.1.0"
description = "Game and utility logic for group chat bots: daily marriages, cooldowns, sign-in scores, sleep tracking, tarot and more"
requires-python = ">=3.10"
dependencies = []
keywords = ["chatbot", "qq", "group chat", "tarot", "sign-in", "plugins"]
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
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qqbotplugins"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "osdemos"
version = "0.1.0"
description = "Small runnable demonstrations of operating-system ideas: processes, threads, locks, condition variables, semaphores, scheduling and persistence."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating systems",
    "threads",
    "semaphores",
    "condition variables",
    "lottery scheduling",
    "producer consumer",
    "dining philosophers",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
osdemos = "osdemos.cli:main"
osdemos-lottery = "osdemos.lottery:main"
osdemos-pstack = "osdemos.pstack:main"
osdemos-udp-client = "osdemos.netdemo:client_main"
osdemos-udp-server = "osdemos.netdemo:server_main"

[tool.hatch.build.targets.wheel]
packages = ["osdemos"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

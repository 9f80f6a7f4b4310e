[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatnet"
version = "0.1.0"
description = "A small TCP chat server and client with a framed packet protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "tcp", "sockets", "protocol", "broadcast"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chatnet-server = "chatnet.server:main"
chatnet-client = "chatnet.client:main"

[tool.hatch.build.targets.wheel]
packages = ["chatnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

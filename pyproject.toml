[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "goodwave"
version = "0.1.0"
description = "HTTP back end serving a catalogue of surf spots stored in MongoDB"
requires-python = ">=3.10"
keywords = ["surf", "surf-spots", "rest-api", "flask", "mongodb"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.2",
    "pymongo>=4.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
goodwave-server = "goodwave.server:main"
goodwave-convert-ids = "goodwave.convert_ids:main"
goodwave-import-data = "goodwave.import_data:main"

[tool.hatch.build.targets.wheel]
packages = ["goodwave"]

[tool.hatch.build.targets.sdist]
include = ["goodwave", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
warn_unused_ignores = true

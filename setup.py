from setuptools import setup, find_packages

from pynim.__version__ import __version__

with open("README.md", "r", encoding="utf-8") as f:
  long_description = f.read()


extras_dev = [
  "pytest",
  "pytest-timeout",
  "pylint",
  "mypy",
]

extras_all = extras_dev

setup(
  name="pynim",
  version=__version__,
  packages=find_packages(include=["pynim", "pynim.*"]),
  description="Two player Nim over TCP",
  long_description=long_description,
  long_description_content_type="text/markdown",
  install_requires=["typing_extensions"],
  package_data={"pynim": ["version.txt"]},
  extras_require={
    "dev": extras_dev,
    "all": extras_all,
  },
  entry_points={
    "console_scripts": [
      "nim-server=pynim.server.nim_server:main",
      "nim=pynim.client.view:main",
    ],
  }
)

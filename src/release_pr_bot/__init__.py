"""GitHub App that opens a pull request for every published release."""

__version__ = "0.1.0"

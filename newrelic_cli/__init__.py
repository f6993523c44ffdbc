"""Command-line client and library for the New Relic REST and NerdGraph APIs."""

__version__ = "0.1.0"
__author__ = "newrelic-cli contributors"
__description__ = "Command-line client for New Relic REST and NerdGraph APIs"

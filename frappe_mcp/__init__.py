"""Frappe MCP Server - MCP tool bridge for the Frappe REST API."""

__version__ = "0.3.0"

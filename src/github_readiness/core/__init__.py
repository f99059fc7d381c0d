"""Core business logic — scoring, evidence rules, the GitHub client, and data models.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
or any server framework.
"""

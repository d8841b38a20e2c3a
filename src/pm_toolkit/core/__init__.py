"""Core business logic — scoring, exports, the item collection, and PRD rendering.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
the database, or any server framework; every function works on explicit
inputs.
"""

"""Tests for the FireCrawl MCP server."""

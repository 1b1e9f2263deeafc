"""Integration tests for gitquill.

These tests drive the HTTP API and the command-line interface end to end:

- test_server.py: every API endpoint, status codes and the error body shape
- test_cli.py: posts, images, guestbook and config commands
"""

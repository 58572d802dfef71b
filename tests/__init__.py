"""Test suite for command_dispatch.

- unit/: Pipeline components with mocked logger and in-memory collaborators
- integration/: Full dispatch against a real Casbin enforcer
"""

"""Test suite for orderstream.

Test structure:
- unit/: Unit tests - each component in isolation, HTTP through
  httpx.MockTransport, collaborators through AsyncMock/MagicMock
"""

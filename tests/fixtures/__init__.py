"""
Pytest fixtures for the NetToolKit test suite.

- http_mocking: MockTransport-backed clients, response builders, recording log sinks
"""

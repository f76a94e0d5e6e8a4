"""
Clients for external services used by the connectors.
"""

"""
Kernel - identity, persistence and collaborator adapters.
"""

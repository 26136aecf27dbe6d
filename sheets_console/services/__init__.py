"""
Service layer: persisted session, remote API and identity provider
clients, dataset directory, export encoders and administration actions.
"""

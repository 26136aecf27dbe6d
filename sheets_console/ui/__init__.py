"""Dash user interface: layout builders, component ids and callbacks."""

"""Persona nodes, one per configured provider binding."""

from echosync.nodes.node import ProviderNode

__all__ = ["ProviderNode"]

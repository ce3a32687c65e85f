"""Asyncio client, messages and data model for the Resonite Link websocket API."""

__version__ = "0.1.0"
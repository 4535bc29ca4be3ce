"""Pingdom API client.

Python client for the Pingdom monitoring REST API: builds authenticated
requests, validates responses and decodes JSON payloads into caller-supplied
types.
"""

__version__ = "0.1.0"

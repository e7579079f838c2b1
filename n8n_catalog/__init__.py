"""
In-process caching and node catalog discovery for the n8n API.
"""

__version__ = "1.0.0"

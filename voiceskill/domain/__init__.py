"""
Domain logic module for conversations.

This package contains the request and response models and the handler
context, independent of platform formats or data storage.
"""

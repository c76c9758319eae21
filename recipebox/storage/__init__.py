"""
Persistent key-value storage for preference and review blobs.
"""

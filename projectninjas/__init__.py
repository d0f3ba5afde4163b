"""
ProjectNinjas API.

Project sharing backend with access-request gated, watermarked file downloads.
"""

__version__ = "1.0.0"

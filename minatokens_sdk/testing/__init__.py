"""
Helpers for integration tests and demos against a devnet.
"""

from .random_data import random_banner, random_image, random_name, random_text

__all__ = ["random_name", "random_text", "random_image", "random_banner"]

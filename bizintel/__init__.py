"""
Business intelligence engine.

Classifies a business from its website content and generates a
multi-intent SEO keyword taxonomy for it.
"""

__version__ = "2.0.0"

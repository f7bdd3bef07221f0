"""JuicyURLs - flag interesting URLs in large URL lists.

URLs are classified syntactically against keyword, extension, path and
hidden-file pattern tables by a bounded asyncio worker pool.
"""

__version__ = "0.1.0"

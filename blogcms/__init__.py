"""BlogCMS backend: blog content management with tag-versioned caching."""

__version__ = "1.0.0"

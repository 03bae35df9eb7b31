"""URL shortener service: short codes, redirects, visit statistics and a hostname blocklist."""

__version__ = "1.0.0"

"""SiteCMS content consistency and media integrity service."""

"""Routes scoped to a single post (``/posts/:slug/...``)."""

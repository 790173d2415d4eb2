"""Browsable corpus of mathematical topic pages: search, wiki links, markup and graphs."""

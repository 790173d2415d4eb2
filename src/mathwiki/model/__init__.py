"""
The MODEL layer contains pure data structures and corpus I/O.
It has NO knowledge of Qt. It deals with the page, visual and derivation
records, their decoding and their validation.
"""

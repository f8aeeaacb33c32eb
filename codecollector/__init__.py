"""
codecollector - collect a source tree into a single shareable document

Walks a directory (or a freshly cloned repository), applies layered
gitignore-style exclusion rules, and produces a tree listing plus the
contents of every included file, ready to be exported as JSON, text or
Markdown.
"""

__version__ = "1.0.0"

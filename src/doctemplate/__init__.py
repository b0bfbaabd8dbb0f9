"""doctemplate - fill placeholders and formulas in document templates."""

__version__ = "0.1.0"

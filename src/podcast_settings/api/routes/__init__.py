from . import hosting, imports, pages, settings

__all__ = ["hosting", "imports", "pages", "settings"]

"""
                Restaurant Menu Service

Restaurant directory and menu-management backend: restaurant profiles,
structured per-item menus with add-on customisation, and image uploads.
"""

__version__ = "1.0.0"

"""
forgecast: podcast media publishing and iTunes feed metadata for static sites.
"""

__version__ = "1.2.0"

"""Satellite pixel extraction around candidate project sites.

Loads candidate development sites, a Meteosat pixel-location grid and
administrative boundary layers, estimates the ground resolution of the
satellite grid, and extracts the pixels that fall inside near and far
buffer zones around each site.
"""

__version__ = "0.1.0"

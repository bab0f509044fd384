"""Pipeline stages.

Each activity performs a single unit of work:
- load_sites / load_pixel_grid / load_boundaries: Read inputs into models
- estimate_resolution: Ground resolution of the satellite grid
- extract_pixels: Pixels within near/far radii of the sites
- buffer_zones: Buffer polygons for display
- render_map: Overview map image
- write_report: JSON report and pixel download list
"""

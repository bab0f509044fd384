"""Render the site / satellite pixel overview map.

Draws, bottom to top: boundary layers, satellite pixels, buffer zone
outlines (dashed, dissolved per radius), project sites with labels and region annotations,
then degree-labelled axes, titles and data-source captions.

All visual options travel in a ``MapStyle`` value passed by the caller;
nothing is read from or written to global plotting state.  Figures are
built with the object-oriented matplotlib API (``Figure`` +
``savefig``) so rendering works headless and never touches pyplot's
current-figure machinery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from site_pixels.activities.buffer_zones import dissolve_by_radius
from site_pixels.core.constants import REGION_LABELS
from site_pixels.core.exceptions import PermanentError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from matplotlib.axes import Axes
    from shapely.geometry.base import BaseGeometry

    from site_pixels.models.boundary import BoundaryLayer
    from site_pixels.models.buffer import BufferZone
    from site_pixels.models.geo import Site
    from site_pixels.models.pixel_grid import PixelGrid

logger = logging.getLogger("site_pixels.activities.render_map")


class RenderError(PermanentError):
    """Raised when the map cannot be drawn or saved."""

    default_stage = "render_map"
    default_code = "RENDER_FAILED"


@dataclass(frozen=True, slots=True)
class LayerStyle:
    """How one boundary layer is drawn."""

    edgecolor: str = "grey"
    linewidth: float = 0.8
    facecolor: str | None = None


@dataclass(frozen=True, slots=True)
class MapStyle:
    """Explicit plotting options for the overview map.

    Boundary layers are matched to ``layer_styles`` by position; layers
    beyond the tuple reuse its last entry.
    With ``dissolve_buffers`` the zones of each radius are drawn as one
    merged outline.
    """

    title: str = "State of Qatar"
    subtitle: str = "Project Sites vs. Meteosat-10 Pixel Locations"
    captions: tuple[str, ...] = (
        "Pixel Map: MSG Data Servers, Satellite Application Facility, EUMETSAT",
        "Land Map: GSHHS and WDBII Databases, National Geophysical Data Center, NOAA",
    )
    figsize: tuple[float, float] = (5.5, 10.0)
    dpi: int = 150
    background: str = "lightcyan"
    layer_styles: tuple[LayerStyle, ...] = (
        LayerStyle(edgecolor="lightskyblue", linewidth=0.8, facecolor="papayawhip"),
        LayerStyle(edgecolor="#737373", linewidth=1.3),
        LayerStyle(edgecolor="#999999", linewidth=0.5),
    )
    pixel_color: str = "plum"
    pixel_size: float = 4.0
    site_color: str = "red"
    site_size: float = 30.0
    buffer_color: str = "red"
    buffer_linestyle: str = "--"
    buffer_linewidth: float = 0.8
    dissolve_buffers: bool = True
    label_fontsize: float = 6.0
    axis_fontsize: float = 6.0
    tick_step: float = 0.2
    region_labels: tuple[tuple[str, float, float], ...] = REGION_LABELS


@dataclass(frozen=True, slots=True)
class MapScene:
    """Everything drawn on the map.

    Attributes:
        bbox: Map extent ``(min_lon, min_lat, max_lon, max_lat)``.
        sites: Project sites.
        grid: Satellite pixel locations.
        boundaries: Vector layers, drawn in order.
        zones: Buffer zones (all radii), drawn as outlines.
    """

    bbox: tuple[float, float, float, float]
    sites: tuple[Site, ...] = ()
    grid: PixelGrid | None = None
    boundaries: tuple[BoundaryLayer, ...] = ()
    zones: tuple[BufferZone, ...] = ()


def render_map(scene: MapScene, out_path: str | Path, style: MapStyle | None = None) -> Path:
    """Draw ``scene`` and save it to ``out_path`` (format from the suffix).

    Returns:
        The written path.

    Raises:
        RenderError: If the figure cannot be saved.
    """
    from matplotlib.figure import Figure

    style = style or MapStyle()
    out_path = Path(out_path)

    fig = Figure(figsize=style.figsize, dpi=style.dpi)
    ax = fig.add_subplot(1, 1, 1)
    ax.set_facecolor(style.background)

    for idx, layer in enumerate(scene.boundaries):
        layer_style = _layer_style(style, idx)
        for geom in layer.geometries:
            _draw_geometry(ax, geom, layer_style)

    if scene.grid is not None and len(scene.grid):
        ax.scatter(
            scene.grid.lons,
            scene.grid.lats,
            s=style.pixel_size,
            c=style.pixel_color,
            linewidths=0,
            zorder=3,
        )

    outline = LayerStyle(edgecolor=style.buffer_color, linewidth=style.buffer_linewidth)
    for geom in buffer_outlines(scene.zones, dissolve=style.dissolve_buffers):
        _draw_geometry(ax, geom, outline, linestyle=style.buffer_linestyle, zorder=4)

    if scene.sites:
        ax.scatter(
            [s.lon for s in scene.sites],
            [s.lat for s in scene.sites],
            s=style.site_size,
            c=style.site_color,
            zorder=5,
        )
        for site in scene.sites:
            ax.annotate(
                site.label,
                (site.lon, site.lat),
                xytext=(3, 3),
                textcoords="offset points",
                fontsize=style.label_fontsize,
                zorder=6,
            )

    for name, lon, lat in style.region_labels:
        ax.text(
            lon,
            lat,
            name,
            fontsize=style.label_fontsize,
            ha="center",
            va="center",
            zorder=6,
            clip_on=True,
        )

    _format_axes(ax, scene.bbox, style)
    fig.suptitle(style.title, fontweight="bold")
    ax.set_title(style.subtitle, fontsize=style.label_fontsize + 3, fontweight="bold")
    if style.captions:
        fig.text(
            0.5,
            0.01,
            "\n".join(style.captions),
            ha="center",
            va="bottom",
            fontsize=style.axis_fontsize,
            style="italic",
        )

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path, bbox_inches="tight")
    except (OSError, ValueError) as exc:
        msg = f"Cannot save map to {out_path}: {exc}"
        raise RenderError(msg) from exc

    logger.info(
        "Map rendered | path=%s | sites=%d | pixels=%d | layers=%d | zones=%d",
        out_path,
        len(scene.sites),
        len(scene.grid) if scene.grid is not None else 0,
        len(scene.boundaries),
        len(scene.zones),
    )
    return out_path


def buffer_outlines(
    zones: Sequence[BufferZone], *, dissolve: bool = True
) -> tuple[BaseGeometry, ...]:
    """Geometries drawn for the buffer zones: one per radius when dissolved."""
    if dissolve:
        return tuple(g for g in dissolve_by_radius(zones) if not g.is_empty)
    return tuple(z.geometry for z in zones if z.geometry is not None)


def degree_label(value: float, *, axis: str) -> str:
    """Format a coordinate as ``25.2°N`` / ``50.8°E`` style text."""
    if axis == "lat":
        hemi = "N" if value >= 0 else "S"
    else:
        hemi = "E" if value >= 0 else "W"
    return f"{abs(value):.1f}°{hemi}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _layer_style(style: MapStyle, idx: int) -> LayerStyle:
    if not style.layer_styles:
        return LayerStyle()
    return style.layer_styles[min(idx, len(style.layer_styles) - 1)]


def _draw_geometry(
    ax: Axes,
    geom: BaseGeometry,
    layer_style: LayerStyle,
    *,
    linestyle: str = "-",
    zorder: int = 1,
) -> None:
    kind = geom.geom_type
    if kind == "Polygon":
        xs, ys = geom.exterior.xy
        if layer_style.facecolor:
            ax.fill(xs, ys, facecolor=layer_style.facecolor, edgecolor="none", zorder=zorder)
        ax.plot(
            xs,
            ys,
            color=layer_style.edgecolor,
            linewidth=layer_style.linewidth,
            linestyle=linestyle,
            zorder=zorder,
        )
    elif kind in ("LineString", "LinearRing"):
        xs, ys = geom.xy
        ax.plot(
            xs,
            ys,
            color=layer_style.edgecolor,
            linewidth=layer_style.linewidth,
            linestyle=linestyle,
            zorder=zorder,
        )
    elif kind == "Point":
        ax.plot(geom.x, geom.y, marker=".", color=layer_style.edgecolor, zorder=zorder)
    elif hasattr(geom, "geoms"):
        for part in geom.geoms:
            _draw_geometry(ax, part, layer_style, linestyle=linestyle, zorder=zorder)


def _format_axes(ax: Axes, bbox: tuple[float, float, float, float], style: MapStyle) -> None:
    import numpy as np

    min_lon, min_lat, max_lon, max_lat = bbox
    ax.set_xlim(min_lon, max_lon)
    ax.set_ylim(min_lat, max_lat)
    ax.set_aspect("equal")

    step = style.tick_step
    xticks = np.arange(np.ceil(min_lon / step) * step, max_lon + 1e-9, step)
    yticks = np.arange(np.ceil(min_lat / step) * step, max_lat + 1e-9, step)
    ax.set_xticks(xticks)
    ax.set_yticks(yticks)
    ax.set_xticklabels([degree_label(v, axis="lon") for v in xticks], fontsize=style.axis_fontsize)
    ax.set_yticklabels([degree_label(v, axis="lat") for v in yticks], fontsize=style.axis_fontsize)
    ax.tick_params(top=True, right=True, labeltop=True, labelright=True)

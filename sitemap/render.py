# -*- coding: utf-8 -*-
"""
created on: 2025-12-08
use:        draw the site location map, one stage richer at a time
"""

# import packages =============================================================

import logging
import numpy as np
import contextily as ctx
import matplotlib.pyplot as plt

from pathlib import Path

from sitemap.config import SCALE_BAR_UNITS
from sitemap.crs import crs_label, same_crs
from sitemap.errors import ConfigurationError, LoadError, TransformationError

logger = logging.getLogger(__name__)

# each stage adds one element to the previous one:
STAGES = ("outline", "fill", "north_arrow", "scale_bar", "labels",
          "categories")
MISSING_CATEGORY = "unknown"

# map elements ================================================================

def add_north_arrow(ax, xy=(0.92, 0.88), length=0.08):
    """
    function to draw an arrow pointing up with an N above it (axes fraction)
    """
    x, y = xy
    ax.annotate("N", xy=(x, y), xytext=(x, y - length),
                xycoords="axes fraction", textcoords="axes fraction",
                ha="center", va="center", fontsize=12, fontweight="bold",
                arrowprops=dict(facecolor="black", edgecolor="black",
                                width=4, headwidth=12, shrink=0.0))
    return ax


def add_scale_bar(ax, length_m, unit="km", xy=(0.06, 0.05)):
    """
    function to draw a two-part black and white scale bar in projected metres

    xy is the left end of the bar in axes fraction.
    """
    x0, x1 = ax.get_xlim()
    y0, y1 = ax.get_ylim()
    if length_m >= (x1 - x0):
        logger.warning("Scale bar (%.0f m) is wider than the map (%.0f m)",
                       length_m, x1 - x0)

    sbx = x0 + (x1 - x0) * xy[0] # left x coordinate of the bar
    sby = y0 + (y1 - y0) * xy[1] # y coordinate of the bar
    factor = SCALE_BAR_UNITS[unit]

    # thick black line with a white first half:
    ax.plot([sbx, sbx + length_m], [sby, sby], color="k", linewidth=4,
            solid_capstyle="butt", zorder=5)
    ax.plot([sbx, sbx + length_m / 2], [sby, sby], color="w", linewidth=2,
            solid_capstyle="butt", zorder=6)

    # tick labels:
    offset = (y1 - y0) * 0.02
    for frac in (0, 0.5, 1):
        value = length_m * frac / factor
        text = f"{value:g}" if frac < 1 else f"{value:g} {unit}"
        ax.text(sbx + length_m * frac, sby + offset, text, ha="center",
                va="bottom", fontsize=7, zorder=6)
    return ax


def add_labels(ax, sites, column, offset=(4.0, 4.0), size=8.0):
    for label, point in zip(sites[column], sites.geometry):
        ax.annotate(str(label), xy=(point.x, point.y), xytext=offset,
                    textcoords="offset points", fontsize=size, zorder=7)
    return ax


def category_colors(values, cmap="tab10"):
    """
    function to map each distinct category to a colour, in order of first
    appearance
    """
    categories = list(dict.fromkeys(values))
    colors = plt.get_cmap(cmap)(np.linspace(0, 1, max(len(categories), 1)))

    return dict(zip(categories, colors))


def add_basemap(ax, crs):
    try:
        ctx.add_basemap(ax, crs=crs.to_string(),
                        source=ctx.providers.Esri.WorldImagery)
    except (OSError, ValueError) as err:
        raise LoadError(f"cannot fetch basemap tiles: {err}") from err
    return ax

# render map ==================================================================

def render_site_map(coast, sites, style, columns, stage="categories",
                    region=None):
    """
    function to draw the coastline and sites with every element up to and
    including `stage`

    Both layers (and the region, if given) have to be in the same projected
    CRS.
    """
    if stage not in STAGES:
        raise ConfigurationError(
            f"unknown map stage {stage!r}, choose from {STAGES}")
    if not same_crs(coast.crs, sites.crs):
        raise TransformationError(
            f"coastline ({crs_label(coast.crs)}) and sites "
            f"({crs_label(sites.crs)}) must share a CRS")
    if region is not None and not same_crs(coast.crs, region.crs):
        raise TransformationError("region must share the coastline CRS")

    level = STAGES.index(stage)
    label_column = columns.label or columns.site_id
    if level >= STAGES.index("labels") and label_column not in sites.columns:
        raise ConfigurationError(
            f"sites have no label column {label_column!r}")
    if level >= STAGES.index("categories"):
        if not columns.category:
            raise ConfigurationError(
                "the categories stage needs columns.category")
        if columns.category not in sites.columns:
            raise ConfigurationError(
                f"sites have no category column {columns.category!r}")

    fig, ax = plt.subplots(figsize=style.figsize)

    # map extent:
    frame = region if region is not None else coast
    if frame.empty:
        frame = sites
    if not frame.empty:
        xmin, ymin, xmax, ymax = frame.total_bounds
        ax.set_xlim(xmin, xmax)
        ax.set_ylim(ymin, ymax)

    # coastline:
    if level >= STAGES.index("fill"):
        ax.set_facecolor(style.water_color)
        if not coast.empty:
            coast.plot(ax=ax, color=style.land_color,
                       edgecolor=style.edge_color, linewidth=0.6, zorder=1)
    elif not coast.empty:
        coast.boundary.plot(ax=ax, color=style.edge_color, linewidth=0.8,
                            zorder=1)

    if style.basemap:
        add_basemap(ax, coast.crs)

    # sites:
    if sites.empty:
        logger.warning("No sites to draw")
    elif level >= STAGES.index("categories"):
        # sites without a category get their own legend entry:
        categories = sites[columns.category].astype(object).fillna(
            MISSING_CATEGORY)
        color_map = category_colors(categories, style.category_cmap)
        for category, color in color_map.items():
            subset = sites[categories == category]
            ax.scatter(subset.geometry.x, subset.geometry.y,
                       marker=style.marker, s=style.marker_size,
                       color=color, edgecolor="black", linewidth=0.5,
                       label=str(category), zorder=4)
        ax.legend(title=columns.category, loc="lower right", fontsize=8)
    else:
        ax.scatter(sites.geometry.x, sites.geometry.y, marker=style.marker,
                   s=style.marker_size, color=style.marker_color,
                   edgecolor="black", linewidth=0.5, zorder=4)

    if level >= STAGES.index("labels") and not sites.empty:
        add_labels(ax, sites, label_column, style.label_offset,
                   style.label_size)

    # keep the frame fixed after plotting:
    if not frame.empty:
        ax.set_xlim(xmin, xmax)
        ax.set_ylim(ymin, ymax)
    ax.set_aspect("equal")

    if level >= STAGES.index("north_arrow"):
        add_north_arrow(ax, style.north_arrow_xy, style.north_arrow_length)
    if level >= STAGES.index("scale_bar"):
        add_scale_bar(ax, style.scale_bar_metres, style.scale_bar_unit,
                      style.scale_bar_xy)

    ax.set_xlabel("Easting (m)")
    ax.set_ylabel("Northing (m)")
    ax.ticklabel_format(style="plain", useOffset=False)
    ax.tick_params(axis="x", labelrotation=45)
    if style.title:
        ax.set_title(style.title)

    return fig, ax


def available_stages(columns):
    if columns.category:
        return STAGES
    return STAGES[:-1]


def render_stages(coast, sites, style, columns, region=None):
    """
    function to draw the map once per stage, from outline only to colours
    by category
    """
    return [(stage, render_site_map(coast, sites, style, columns, stage,
                                    region)[0])
            for stage in available_stages(columns)]


def save_figure(fig, path, dpi=200):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved map to %s", path)

    return path

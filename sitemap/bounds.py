# -*- coding: utf-8 -*-
"""
created on: 2025-12-03
use:        build the region of interest polygon used to crop the coastline
"""

# import packages =============================================================

import logging
import shapely
import geopandas as gpd

from pyproj.exceptions import CRSError, ProjError
from shapely.geometry import box

from sitemap.crs import crs_label, require_geographic, require_projected
from sitemap.errors import ConfigurationError, TransformationError

logger = logging.getLogger(__name__)

# define functions ============================================================

def build_bounding_region(extent, geographic_crs, projected_crs, densify=21):
    """
    function to turn the four extent values into a polygon in the projected
    CRS

    The rectangle is built from the corners in degrees and the shorter edges
    get `densify` extra vertices (longer edges proportionally more), so the
    reprojected outline follows the curved edges instead of cutting across
    them. Corner vertices are kept as they are, reprojecting back to degrees
    gives the extent again.
    """
    if not (extent.north > extent.south and extent.east > extent.west):
        raise ConfigurationError(f"degenerate extent: {extent}")
    if densify < 0:
        raise ConfigurationError("densify must be >= 0")

    geographic_crs = require_geographic(geographic_crs)
    projected_crs = require_projected(projected_crs)

    # rectangle in degrees:
    rect = box(*extent.bounds)
    if densify:
        step = min(extent.east - extent.west,
                   extent.north - extent.south) / (densify + 1)
        rect = shapely.segmentize(rect, max_segment_length=step)

    region = gpd.GeoDataFrame(
        {"name": ["region"]},
        geometry=[rect],
        crs=geographic_crs
    )

    # get eastings and northings:
    try:
        region = region.to_crs(projected_crs)
    except (CRSError, ProjError) as err:
        raise TransformationError(
            f"cannot reproject region to {crs_label(projected_crs)}") from err

    geom = region.geometry.iloc[0]
    if geom is None or geom.is_empty or not geom.is_valid or geom.area <= 0:
        raise TransformationError(
            f"region is degenerate in {crs_label(projected_crs)}")

    xmin, ymin, xmax, ymax = region.total_bounds
    logger.info("Region in %s: x %.1f to %.1f, y %.1f to %.1f (%.2f km²)",
                crs_label(projected_crs), xmin, xmax, ymin, ymax,
                geom.area / 1e6)

    return region


def region_bounds_geographic(region, geographic_crs):
    """
    function to get (west, south, east, north) of a region in degrees
    """
    geographic_crs = require_geographic(geographic_crs)
    if region.crs is None:
        raise TransformationError("region has no CRS")

    try:
        west, south, east, north = region.to_crs(geographic_crs).total_bounds
    except (CRSError, ProjError) as err:
        raise TransformationError(
            f"cannot reproject region to {crs_label(geographic_crs)}") from err

    return west, south, east, north

# -*- coding: utf-8 -*-
"""
created on: 2025-12-04
use:        turn the survey site table into projected point geometries
"""

# import packages =============================================================

import logging
import numpy as np
import pandas as pd
import geopandas as gpd

from sitemap.crs import crs_label, require_geographic
from sitemap.errors import ConfigurationError, DataQualityError, LoadError
from sitemap.layers import reproject

logger = logging.getLogger(__name__)

INVALID_ROW_POLICIES = ("drop", "raise")

# read site table =============================================================

def read_sites_table(source, required_columns=()):
    """
    function to read the site CSV from disk or a URL and check its columns
    """
    try:
        table = pd.read_csv(source)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError,
            UnicodeDecodeError) as err:
        raise LoadError(f"cannot read site table {source}: {err}") from err

    table.columns = [str(c).strip() for c in table.columns]

    missing = [c for c in required_columns if c not in table.columns]
    if missing:
        raise LoadError(
            f"site table {source} is missing columns: {', '.join(missing)} "
            f"(found: {', '.join(table.columns)})")

    logger.info("Read %d site rows from %s", len(table), source)

    return table

# build point layer ===========================================================

def invalid_coordinate_rows(table, longitude_column, latitude_column):
    """
    function to flag rows whose coordinates are missing, not numeric or out
    of range for decimal degrees
    """
    lons = pd.to_numeric(table[longitude_column], errors="coerce")
    lats = pd.to_numeric(table[latitude_column], errors="coerce")

    valid = (np.isfinite(lons) & np.isfinite(lats)
             & lons.between(-180, 180) & lats.between(-90, 90))

    return ~valid, lons, lats


def build_point_layer(table, longitude_column, latitude_column, crs,
                      on_invalid="drop"):
    """
    function to build one point per row with x = longitude, y = latitude

    The CRS is only assigned, coordinates are taken as already being in it.
    Rows with bad coordinates are dropped with a warning (on_invalid="drop")
    or abort the whole table (on_invalid="raise").
    """
    if on_invalid not in INVALID_ROW_POLICIES:
        raise ConfigurationError(
            f"on_invalid must be one of {INVALID_ROW_POLICIES}, got "
            f"{on_invalid!r}")
    crs = require_geographic(crs)

    for column in (longitude_column, latitude_column):
        if column not in table.columns:
            raise LoadError(f"site table has no column {column!r}")

    invalid, lons, lats = invalid_coordinate_rows(table, longitude_column,
                                                  latitude_column)

    if invalid.any():
        bad = table.loc[invalid, [longitude_column, latitude_column]]
        if on_invalid == "raise":
            rows = ", ".join(f"{i} ({r[longitude_column]!r}, "
                             f"{r[latitude_column]!r})"
                             for i, r in bad.iterrows())
            raise DataQualityError(
                f"{len(bad)} site rows have invalid coordinates: {rows}")

        for i, row in bad.iterrows():
            logger.warning("Dropping site row %s: invalid coordinates "
                           "(%s=%r, %s=%r)", i, longitude_column,
                           row[longitude_column], latitude_column,
                           row[latitude_column])

    valid = ~invalid
    points = gpd.points_from_xy(lons[valid], lats[valid])

    # build GeoDataFrame and declare its CRS:
    gdf = gpd.GeoDataFrame(
        table.loc[valid].copy(),
        geometry=points,
    ).set_crs(crs)

    logger.info("Built %d site points (%d rejected) in %s", len(gdf),
                int(invalid.sum()), crs_label(crs))

    return gdf.reset_index(drop=True)


def site_layer(table, config):
    """
    function to build the site points and bring them into the projected CRS
    """
    columns = config.columns
    points = build_point_layer(table, columns.longitude, columns.latitude,
                               config.geographic_crs,
                               on_invalid=config.invalid_rows)

    return reproject(points, config.projected_crs)

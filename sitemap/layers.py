# -*- coding: utf-8 -*-
"""
created on: 2025-12-03
use:        load, reproject and crop the coastline polygons
"""

# import packages =============================================================

import logging
import fiona
import pandas as pd
import geopandas as gpd

from pathlib import Path
from pyproj.exceptions import CRSError, ProjError

from sitemap.crs import crs_label, resolve_crs, same_crs
from sitemap.errors import LoadError, TransformationError

logger = logging.getLogger(__name__)

SHAPEFILE_PARTS = (".shp", ".shx", ".dbf", ".prj")
POLYGON_TYPES = ("Polygon", "MultiPolygon")

# shapefile components ========================================================

def check_shapefile_components(path):
    """
    function to make sure the geometry, index, attribute and projection files
    of a shapefile are all next to each other
    """
    path = Path(path)
    if path.suffix.lower() != ".shp":
        raise LoadError(f"not a shapefile: {path}")

    # sidecars may differ in case (e.g. .SHX next to .shp):
    siblings = {}
    if path.parent.is_dir():
        siblings = {p.name.lower(): p for p in path.parent.iterdir()
                    if p.stem == path.stem}

    found = {}
    missing = []
    for suffix in SHAPEFILE_PARTS:
        part = siblings.get((path.stem + suffix).lower())
        if part is None:
            missing.append(path.stem + suffix)
        else:
            found[suffix] = part

    if missing:
        raise LoadError(
            f"incomplete shapefile {path}, missing: {', '.join(missing)}")

    return found

# load and write ==============================================================

def load_vector_layer(path):
    """
    function to read a polygon shapefile with its native CRS

    A shapefile without a projection is not given a default CRS, it is
    rejected.
    """
    path = Path(path)
    check_shapefile_components(path)

    # read native CRS and geometry type from the header:
    try:
        with fiona.open(str(path)) as shapefile:
            native_crs = shapefile.crs
            schema_type = shapefile.schema["geometry"]
            n_features = len(shapefile)
    except fiona.errors.FionaError as err:
        raise LoadError(f"cannot open {path}: {err}") from err

    if not native_crs:
        raise LoadError(f"{path} has no coordinate reference system")
    if schema_type not in POLYGON_TYPES:
        raise LoadError(f"{path} holds {schema_type} features, not polygons")

    try:
        layer = gpd.read_file(path, engine="fiona")
    except (fiona.errors.FionaError, OSError, ValueError) as err:
        raise LoadError(f"cannot read {path}: {err}") from err

    if layer.crs is None:
        raise LoadError(f"{path} has no coordinate reference system")

    # drop null and empty geometries:
    empty = layer.geometry.isna() | layer.geometry.is_empty
    if empty.any():
        logger.warning("Dropping %d empty geometries from %s",
                       int(empty.sum()), path.name)
        layer = layer[~empty]

    wrong = ~layer.geom_type.isin(POLYGON_TYPES)
    if wrong.any():
        raise LoadError(
            f"{path} holds non-polygon geometries: "
            f"{sorted(set(layer.geom_type[wrong]))}")

    logger.info("Loaded %d of %d polygons from %s (%s)", len(layer),
                n_features, path.name, crs_label(layer.crs))

    return layer.reset_index(drop=True)


def write_vector_layer(layer, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # export to disk:
    layer.to_file(path, driver="ESRI Shapefile", engine="fiona")
    logger.info("Wrote %d features to %s", len(layer), path)

    return path

# reproject ===================================================================

def reproject(layer, target_crs):
    """
    function to transform every coordinate of a layer into target_crs

    Returns a new layer, attributes are left as they are.
    """
    target_crs = resolve_crs(target_crs)
    if layer.crs is None:
        raise TransformationError("cannot reproject a layer without a CRS")

    try:
        return layer.to_crs(target_crs)
    except (CRSError, ProjError) as err:
        raise TransformationError(
            f"cannot reproject {crs_label(layer.crs)} to "
            f"{crs_label(target_crs)}") from err

# crop ========================================================================

def crop_to_region(layer, region):
    """
    function to restrict polygons to a region

    Polygons inside the region are kept untouched, polygons outside are
    dropped and polygons on the edge are clipped. A clip that splits a
    polygon gives one row per piece, each with the same attributes.
    """
    if not same_crs(layer.crs, region.crs):
        raise TransformationError(
            f"layer ({crs_label(layer.crs)}) and region "
            f"({crs_label(region.crs)}) must share a CRS")

    mask = region.geometry.union_all()

    geoms = layer.geometry
    invalid = ~geoms.is_valid
    if invalid.any():
        logger.warning("Repairing %d invalid polygons before cropping",
                       int(invalid.sum()))
        geoms = geoms.copy()
        geoms[invalid] = geoms[invalid].make_valid()

    inside = geoms.within(mask)
    straddling = ~inside & geoms.intersects(mask)
    # a repair can leave collections with lines or points next to polygons:
    mixed = inside & ~geoms.geom_type.isin(POLYGON_TYPES)

    kept = layer[inside & ~mixed].copy()
    kept[kept.geometry.name] = geoms[inside & ~mixed]
    kept["__order"] = kept.index

    repaired = layer[mixed].copy()
    repaired[repaired.geometry.name] = geoms[mixed]
    repaired["__order"] = repaired.index
    repaired = _polygon_parts(repaired)

    clipped = layer[straddling].copy()
    clipped[clipped.geometry.name] = geoms[straddling].intersection(mask)
    clipped["__order"] = clipped.index
    clipped = _polygon_parts(clipped)

    cropped = pd.concat([kept, repaired, clipped])
    cropped = gpd.GeoDataFrame(cropped, geometry=layer.geometry.name,
                               crs=layer.crs)
    cropped = cropped.sort_values("__order", kind="stable")
    cropped = cropped.drop(columns="__order").reset_index(drop=True)

    logger.info("Cropped %d polygons: %d inside, %d clipped into %d pieces, "
                "%d dropped", len(layer), int(inside.sum()),
                int(straddling.sum()), len(clipped),
                int((~inside & ~straddling).sum()))

    return cropped


def _polygon_parts(layer):
    # one row per polygon, lines and points from edge contact are dropped:
    if layer.empty:
        return layer

    parts = layer.explode(index_parts=False)
    parts = parts[parts.geom_type == "Polygon"]
    parts = parts[~parts.geometry.is_empty & (parts.geometry.area > 0)]

    return parts

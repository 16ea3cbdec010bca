# -*- coding: utf-8 -*-
"""
created on: 2025-12-05
use:        keep cropped coastlines on disk so later runs can skip the
            load, reproject and crop steps
"""

# import packages =============================================================

import json
import shutil
import hashlib
import logging
import fiona
import geopandas as gpd

from pathlib import Path
from pyproj import CRS
from pyproj.exceptions import CRSError

from sitemap.crs import crs_label
from sitemap.layers import write_vector_layer

logger = logging.getLogger(__name__)

CACHE_FILE = "cropped.shp"
META_FILE = "meta.json"

# define functions ============================================================

def cache_key(source_path, geographic_crs, projected_crs, extent):
    """
    function to derive a stable key from the coastline path, both CRSs and
    the extent
    """
    payload = {
        "source": str(Path(source_path).resolve()),
        "geographic_crs": crs_label(geographic_crs),
        "projected_crs": crs_label(projected_crs),
        "extent": [round(float(v), 9) for v in (extent.north, extent.south,
                                                extent.east, extent.west)],
    }
    raw = json.dumps(payload, sort_keys=True)

    return hashlib.sha256(raw.encode()).hexdigest()[:32]


class CropCache:
    """
    cropped coastline layers stored as shapefiles under <directory>/<key>/

    A cache without a directory is disabled: every lookup misses and nothing
    is written.
    """

    def __init__(self, directory=None):
        self.directory = Path(directory) if directory else None

    @property
    def enabled(self):
        return self.directory is not None

    def path_for(self, key):
        return self.directory / key / CACHE_FILE

    def get(self, key):
        if not self.enabled:
            return None

        path = self.path_for(key)
        if not path.exists():
            logger.info("Crop cache miss (%s)", key)
            return None

        try:
            meta = json.loads((path.parent / META_FILE).read_text())
            layer = gpd.read_file(path, engine="fiona")
            # the .prj round trip can lose the EPSG identity:
            layer = layer.set_crs(CRS.from_wkt(meta["crs"]),
                                  allow_override=True)
        except (fiona.errors.FionaError, OSError, ValueError, KeyError,
                CRSError) as err:
            logger.warning("Discarding unreadable cache entry %s: %s",
                           path.parent, err)
            self.invalidate(key)
            return None

        logger.info("Crop cache hit (%s): %d polygons", key, len(layer))
        return layer

    def put(self, key, layer):
        if not self.enabled:
            return None
        if layer.empty:
            logger.info("Not caching an empty coastline (%s)", key)
            return None

        # write next to the entry and swap in, a failed write leaves no entry:
        entry = self.directory / key
        tmp = self.directory / f".{key}.tmp"
        shutil.rmtree(tmp, ignore_errors=True)
        write_vector_layer(layer, tmp / CACHE_FILE)
        (tmp / META_FILE).write_text(json.dumps({"crs": layer.crs.to_wkt(),
                                                 "count": len(layer)}))

        shutil.rmtree(entry, ignore_errors=True)
        tmp.rename(entry)
        logger.info("Cached cropped coastline as %s", key)

        return entry / CACHE_FILE

    def invalidate(self, key):
        if self.enabled:
            shutil.rmtree(self.directory / key, ignore_errors=True)

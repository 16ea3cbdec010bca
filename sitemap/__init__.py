# -*- coding: utf-8 -*-
"""
created on: 2025-12-02
use:        static site location maps from a coastline shapefile and a CSV
            of survey sites
"""

from sitemap.bounds import build_bounding_region, region_bounds_geographic
from sitemap.cache import CropCache, cache_key
from sitemap.config import (Columns, Extent, InputPaths, RenderStyle,
                            SiteMapConfig)
from sitemap.crs import GEOGRAPHIC_EPSG, PROJECTED_EPSG, resolve_crs
from sitemap.errors import (ConfigurationError, DataQualityError, LoadError,
                            SiteMapError, TransformationError)
from sitemap.layers import (crop_to_region, load_vector_layer, reproject,
                            write_vector_layer)
from sitemap.pipeline import PipelineResult, run
from sitemap.points import build_point_layer, read_sites_table, site_layer
from sitemap.render import STAGES, render_site_map, render_stages, save_figure

__version__ = "0.1.0"

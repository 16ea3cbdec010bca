# -*- coding: utf-8 -*-
"""
created on: 2025-12-09
use:        run the site map steps in order: region, coastline, sites, map
"""

# import packages =============================================================

import logging

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import geopandas as gpd

from sitemap.bounds import build_bounding_region, region_bounds_geographic
from sitemap.cache import CropCache, cache_key
from sitemap.crs import crs_label
from sitemap.errors import ConfigurationError
from sitemap.layers import crop_to_region, load_vector_layer, reproject
from sitemap.points import read_sites_table, site_layer
from sitemap.render import available_stages, render_site_map, save_figure

logger = logging.getLogger(__name__)

# define result record ========================================================

@dataclass
class PipelineResult:
    region: gpd.GeoDataFrame
    coast: gpd.GeoDataFrame
    sites: gpd.GeoDataFrame
    output_paths: List[Path] = field(default_factory=list)
    cache_hit: bool = False

# define steps ================================================================

def coastline_layer(config, region):
    """
    function to get the cropped coastline, from the cache if possible
    """
    paths = config.input_paths
    cache = CropCache(paths.cache_dir)
    key = None

    if cache.enabled:
        key = cache_key(paths.coastline, config.geographic_crs,
                        config.projected_crs, config.extent)
        cached = cache.get(key)
        if cached is not None:
            return reproject(cached, config.projected_crs), True

    coast = load_vector_layer(paths.coastline)
    coast = reproject(coast, config.projected_crs)
    coast = crop_to_region(coast, region)

    if cache.enabled:
        cache.put(key, coast)

    return coast, False


def stage_output_path(output, stage):
    output = Path(output)
    return output.with_name(f"{output.stem}_{stage}{output.suffix}")


def run(config, stages=None, output=None):
    """
    function to build the site map described by config

    stages: None draws only the richest available stage to the output path,
            a list of stage names writes one file per stage
            (<output>_<stage>.png)
    """
    output = Path(output or config.input_paths.output)

    # stage names are checked before any file is read:
    if stages is not None:
        allowed = available_stages(config.columns)
        unknown = [s for s in stages if s not in allowed]
        if unknown:
            raise ConfigurationError(
                f"map stages {unknown} are not available, choose from "
                f"{allowed}")

    logger.info("Geographic CRS %s, projected CRS %s",
                crs_label(config.geographic_crs),
                crs_label(config.projected_crs))

    # region of interest:
    region = build_bounding_region(config.extent, config.geographic_crs,
                                   config.projected_crs)
    logger.debug("Region back in degrees: %s",
                 region_bounds_geographic(region, config.geographic_crs))

    # coastline:
    coast, cache_hit = coastline_layer(config, region)

    # sites:
    table = read_sites_table(config.input_paths.sites,
                             config.columns.required)
    sites = site_layer(table, config)

    # maps:
    result = PipelineResult(region=region, coast=coast, sites=sites,
                            cache_hit=cache_hit)
    style = config.render_style

    if stages is None:
        fig, _ = render_site_map(coast, sites, style, config.columns,
                                 available_stages(config.columns)[-1],
                                 region)
        result.output_paths.append(save_figure(fig, output, style.dpi))
    else:
        for stage in stages:
            fig, _ = render_site_map(coast, sites, style, config.columns,
                                     stage, region)
            path = stage_output_path(output, stage)
            result.output_paths.append(save_figure(fig, path, style.dpi))

    logger.info("Site map done: %d coastline polygons, %d sites, %d figures",
                len(coast), len(sites), len(result.output_paths))

    return result

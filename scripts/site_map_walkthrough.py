# -*- coding: utf-8 -*-
"""
created on: 2025-12-10
use:        step-by-step site location map for the Barkley Sound survey
            sites (the same steps sitemap.pipeline.run goes through)
"""

# import packages =============================================================

import os
import logging
import matplotlib.pyplot as plt

from sitemap import (CropCache, SiteMapConfig, build_bounding_region,
                     cache_key, crop_to_region, load_vector_layer,
                     read_sites_table, render_stages, reproject, save_figure,
                     site_layer)

logging.basicConfig(level=logging.INFO,
                    format="%(levelname)s %(name)s: %(message)s")

# set working directory =======================================================

base_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
os.chdir(base_path)

# read configuration ==========================================================

config = SiteMapConfig.from_yaml("./config/barkley_sound.yaml")

print(f"Geographic CRS: {config.geographic_crs.name}")
print(f"Projected CRS:  {config.projected_crs.name}")

# define study area ===========================================================

# north, south, east, west in decimal degrees, from the configuration:
extent = config.extent
print(f"Extent: {extent}")

region = build_bounding_region(extent, config.geographic_crs,
                               config.projected_crs)

# read and crop coastline =====================================================

cache = CropCache(config.input_paths.cache_dir)
key = cache_key(config.input_paths.coastline, config.geographic_crs,
                config.projected_crs, extent)

coast = cache.get(key)

if coast is None:
    coast = load_vector_layer(config.input_paths.coastline)
    coast = reproject(coast, config.projected_crs)
    coast = crop_to_region(coast, region)
    cache.put(key, coast)

# read site coordinates =======================================================

table = read_sites_table(config.input_paths.sites, config.columns.required)
sites = site_layer(table, config)

print(sites.head())

# plot maps ===================================================================

figures = render_stages(coast, sites, config.render_style, config.columns,
                        region)

for stage, fig in figures:
    fig.suptitle(f"Stage: {stage}")
    plt.show()
    save_figure(fig, f"./output/site_map_{stage}.png",
                config.render_style.dpi)

"""Pytest configuration and fixtures for site map tests."""

import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Polygon, box

from sitemap.config import Columns, Extent, InputPaths, RenderStyle, SiteMapConfig

BARKLEY = dict(north=48.922, south=48.80, east=-125.05, west=-125.26)


@pytest.fixture
def extent():
    """Region of interest around Bamfield, Barkley Sound."""
    return Extent(**BARKLEY)


@pytest.fixture
def square_region():
    """A 10 km square region in BC Albers."""
    return gpd.GeoDataFrame({"name": ["region"]},
                            geometry=[box(0, 0, 10000, 10000)], crs=3005)


@pytest.fixture
def coastline_shapefile(tmp_path):
    """Coastline polygons in degrees: one inside, one on the edge, one far away."""
    polygons = [
        box(-125.20, 48.84, -125.15, 48.88),  # inside the extent
        box(-125.10, 48.85, -125.00, 48.90),  # crosses the east edge
        box(-124.00, 49.50, -123.90, 49.60),  # outside
    ]
    gdf = gpd.GeoDataFrame({"name": ["island", "headland", "far"],
                            "kind": ["land", "land", "land"]},
                           geometry=polygons, crs=4326)
    path = tmp_path / "coast" / "coastline.shp"
    path.parent.mkdir()
    gdf.to_file(path, driver="ESRI Shapefile", engine="fiona")
    return path


@pytest.fixture
def sites_csv(tmp_path):
    """Three valid survey sites as a CSV file."""
    df = pd.DataFrame({
        "site": ["S1", "S2", "S3"],
        "lat": [48.835, 48.86, 48.90],
        "lon": [-125.13, -125.20, -125.09],
        "habitat": ["kelp", "eelgrass", "kelp"],
    })
    path = tmp_path / "sites.csv"
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def make_config(tmp_path, coastline_shapefile, sites_csv, extent):
    """Build a configuration pointing at the temporary inputs."""

    def _make(**overrides):
        values = dict(
            extent=extent,
            input_paths=InputPaths(coastline=coastline_shapefile,
                                   sites=str(sites_csv),
                                   cache_dir=tmp_path / "cache",
                                   output=tmp_path / "out" / "map.png"),
            columns=Columns(site_id="site", longitude="lon", latitude="lat",
                            label="site", category="habitat"),
            render_style=RenderStyle(figsize=(4, 4), dpi=50),
        )
        values.update(overrides)
        return SiteMapConfig(**values)

    return _make


@pytest.fixture
def u_shape():
    """Upside-down U: the arch sits above y = 10000, the two legs reach below it."""
    return Polygon([(2000, 14000), (8000, 14000), (8000, 4000), (6000, 4000),
                    (6000, 12000), (4000, 12000), (4000, 4000), (2000, 4000)])


@pytest.fixture
def spiked_square():
    """A 2 km square with a zero-width spike, invalid until repaired."""
    return Polygon([(1000, 1000), (3000, 1000), (3000, 2000), (5000, 2000),
                    (3000, 2000), (3000, 3000), (1000, 3000)])

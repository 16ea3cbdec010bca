# -*- coding: utf-8 -*-
"""
created on: 2025-12-02
use:        configuration record for a site map run

Example YAML:
    geographic_crs_code: 4326
    projected_crs_code: 3005

    extent:
      north: 48.922
      south: 48.80
      east: -125.05
      west: -125.26

    input_paths:
      coastline: "./data/coast/coastline.shp"
      sites: "./data/sites.csv"
      cache_dir: "./data/cache"
      output: "./output/site_map.png"

    columns:
      site_id: "site"
      longitude: "lon"
      latitude: "lat"
      label: "site"
      category: "habitat"

    invalid_rows: "drop"

    render_style:
      land_color: "darkkhaki"
      scale_bar_length: 2
      scale_bar_unit: "km"
"""

# import packages =============================================================

import math
import yaml

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from matplotlib import colors as mcolors

from sitemap.crs import (GEOGRAPHIC_EPSG, PROJECTED_EPSG, require_geographic,
                         require_projected)
from sitemap.errors import ConfigurationError
from sitemap.points import INVALID_ROW_POLICIES

SCALE_BAR_UNITS = {"m": 1.0, "km": 1000.0}

# define configuration records ================================================

@dataclass(frozen=True)
class Extent:
    """
    rectangular region of interest in decimal degrees, west is more negative
    """

    north: float
    south: float
    east: float
    west: float

    def __post_init__(self):
        for name in ("north", "south", "east", "west"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(
                    f"extent.{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"extent.{name} must be finite")

        if not -90 <= self.south < self.north <= 90:
            raise ConfigurationError(
                f"extent needs -90 <= south < north <= 90, got "
                f"south={self.south}, north={self.north}")
        if not -180 <= self.west < self.east <= 180:
            raise ConfigurationError(
                f"extent needs -180 <= west < east <= 180, got "
                f"west={self.west}, east={self.east}")

    @property
    def bounds(self):
        """(minx, miny, maxx, maxy) ordering used by shapely and geopandas"""
        return (self.west, self.south, self.east, self.north)


@dataclass(frozen=True)
class InputPaths:
    coastline: Path
    sites: str # local path or URL
    cache_dir: Optional[Path] = None
    output: Path = Path("site_map.png")

    def __post_init__(self):
        if not str(self.coastline):
            raise ConfigurationError("input_paths.coastline is required")
        if not str(self.sites):
            raise ConfigurationError("input_paths.sites is required")
        if Path(self.coastline).suffix.lower() != ".shp":
            raise ConfigurationError(
                f"input_paths.coastline must point at a .shp file, got "
                f"{self.coastline}")


@dataclass(frozen=True)
class Columns:
    """
    names of the CSV columns, longitude is always x and latitude always y
    """

    site_id: str = "site"
    longitude: str = "lon"
    latitude: str = "lat"
    label: Optional[str] = None
    category: Optional[str] = None

    def __post_init__(self):
        if self.longitude == self.latitude:
            raise ConfigurationError(
                "columns.longitude and columns.latitude must differ")
        for name in ("site_id", "longitude", "latitude"):
            if not getattr(self, name):
                raise ConfigurationError(f"columns.{name} is required")

    @property
    def required(self):
        names = [self.site_id, self.longitude, self.latitude]
        names += [c for c in (self.label, self.category) if c]
        return list(dict.fromkeys(names))


@dataclass(frozen=True)
class RenderStyle:
    """
    cosmetic settings for the map figures
    """

    figsize: Tuple[float, float] = (8.0, 8.0)
    dpi: int = 200
    title: Optional[str] = None

    # coastline:
    land_color: str = "darkkhaki"
    edge_color: str = "black"
    water_color: str = "lightblue"

    # sites:
    marker: str = "o"
    marker_size: float = 40.0
    marker_color: str = "red"
    category_cmap: str = "tab10"

    # labels (offset in points):
    label_offset: Tuple[float, float] = (4.0, 4.0)
    label_size: float = 8.0

    # north arrow (axes fraction):
    north_arrow_xy: Tuple[float, float] = (0.92, 0.88)
    north_arrow_length: float = 0.08

    # scale bar (axes fraction for the left end):
    scale_bar_length: float = 2.0
    scale_bar_unit: str = "km"
    scale_bar_xy: Tuple[float, float] = (0.06, 0.05)

    basemap: bool = False

    def __post_init__(self):
        if len(self.figsize) != 2 or min(self.figsize) <= 0:
            raise ConfigurationError(
                f"render_style.figsize must be two positive numbers, got "
                f"{self.figsize}")
        if self.dpi <= 0:
            raise ConfigurationError("render_style.dpi must be positive")
        for name in ("land_color", "edge_color", "water_color",
                     "marker_color"):
            if not mcolors.is_color_like(getattr(self, name)):
                raise ConfigurationError(
                    f"render_style.{name} is not a colour: "
                    f"{getattr(self, name)!r}")
        if self.marker_size <= 0:
            raise ConfigurationError("render_style.marker_size must be > 0")
        if self.scale_bar_unit not in SCALE_BAR_UNITS:
            raise ConfigurationError(
                f"render_style.scale_bar_unit must be one of "
                f"{sorted(SCALE_BAR_UNITS)}, got {self.scale_bar_unit!r}")
        if self.scale_bar_length <= 0:
            raise ConfigurationError(
                "render_style.scale_bar_length must be > 0")
        if not 0 < self.north_arrow_length < 1:
            raise ConfigurationError(
                "render_style.north_arrow_length must be an axes fraction")
        for name in ("north_arrow_xy", "scale_bar_xy"):
            xy = getattr(self, name)
            if len(xy) != 2 or not all(0 <= v <= 1 for v in xy):
                raise ConfigurationError(
                    f"render_style.{name} must be an axes fraction pair, got "
                    f"{xy}")

    @property
    def scale_bar_metres(self):
        return self.scale_bar_length * SCALE_BAR_UNITS[self.scale_bar_unit]


@dataclass(frozen=True)
class SiteMapConfig:
    extent: Extent
    input_paths: InputPaths
    columns: Columns = field(default_factory=Columns)
    render_style: RenderStyle = field(default_factory=RenderStyle)
    geographic_crs_code: int = GEOGRAPHIC_EPSG
    projected_crs_code: int = PROJECTED_EPSG
    invalid_rows: str = "drop"

    def __post_init__(self):
        # unknown codes fail here, before any file is touched:
        require_geographic(self.geographic_crs_code)
        require_projected(self.projected_crs_code)

        if self.invalid_rows not in INVALID_ROW_POLICIES:
            raise ConfigurationError(
                f"invalid_rows must be one of {INVALID_ROW_POLICIES}, got "
                f"{self.invalid_rows!r}")

    @property
    def geographic_crs(self):
        return require_geographic(self.geographic_crs_code)

    @property
    def projected_crs(self):
        return require_projected(self.projected_crs_code)

    @classmethod
    def from_dict(cls, data):
        """
        function to build the nested records from plain (YAML) data
        """
        if not isinstance(data, dict):
            raise ConfigurationError("configuration must be a mapping")

        try:
            extent = Extent(**_section(data, "extent", required=True))
            paths = _section(data, "input_paths", required=True)
        except KeyError as err:
            raise ConfigurationError(
                f"missing configuration section: {err.args[0]}") from err
        except TypeError as err:
            raise ConfigurationError(f"bad extent: {err}") from err

        try:
            input_paths = InputPaths(
                coastline=Path(paths["coastline"]),
                sites=str(paths["sites"]),
                cache_dir=(Path(paths["cache_dir"])
                           if paths.get("cache_dir") else None),
                output=Path(paths.get("output", "site_map.png")))
            columns = Columns(**_section(data, "columns"))
            render_style = RenderStyle(**_tuples(_section(data,
                                                          "render_style")))
        except KeyError as err:
            raise ConfigurationError(
                f"missing input path: {err.args[0]}") from err
        except TypeError as err:
            raise ConfigurationError(f"unknown setting: {err}") from err

        return cls(
            extent=extent,
            input_paths=input_paths,
            columns=columns,
            render_style=render_style,
            geographic_crs_code=data.get("geographic_crs_code",
                                         GEOGRAPHIC_EPSG),
            projected_crs_code=data.get("projected_crs_code", PROJECTED_EPSG),
            invalid_rows=data.get("invalid_rows", "drop"))

    @classmethod
    def from_yaml(cls, yaml_path):
        yaml_path = Path(yaml_path)
        try:
            with open(yaml_path) as f:
                data = yaml.safe_load(f)
        except OSError as err:
            raise ConfigurationError(
                f"cannot read configuration {yaml_path}: {err}") from err
        except yaml.YAMLError as err:
            raise ConfigurationError(
                f"invalid YAML in {yaml_path}: {err}") from err

        return cls.from_dict(data)


def _section(data, name, required=False):
    # an empty YAML section loads as None:
    if required and name not in data:
        raise KeyError(name)
    section = data.get(name)
    if section is None:
        if required:
            raise ConfigurationError(f"configuration section {name} is empty")
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"configuration section {name} must be a mapping, got "
            f"{type(section).__name__}")
    return section


def _tuples(data):
    # YAML gives lists where the style expects tuples:
    return {k: tuple(v) if isinstance(v, list) else v for k, v in data.items()}

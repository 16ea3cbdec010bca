# -*- coding: utf-8 -*-
"""
created on: 2025-12-02
use:        coordinate reference systems used by the site map
"""

# import packages =============================================================

from pyproj import CRS
from pyproj.exceptions import CRSError

from sitemap.errors import ConfigurationError

# define CRS constants ========================================================

GEOGRAPHIC_EPSG = 4326 # WGS 84, decimal degrees
PROJECTED_EPSG = 3005  # NAD83 / BC Albers, metres

# define functions ============================================================

def resolve_crs(code):
    """
    function to turn an EPSG code (or "EPSG:xxxx" string) into a pyproj CRS
    """
    if isinstance(code, CRS):
        return code
    if isinstance(code, bool) or code is None:
        raise ConfigurationError(f"Invalid CRS code: {code!r}")

    try:
        return CRS.from_user_input(code)
    except CRSError as err:
        raise ConfigurationError(f"Unknown CRS code: {code!r}") from err


def require_geographic(crs):
    crs = resolve_crs(crs)
    if not crs.is_geographic:
        raise ConfigurationError(
            f"{crs.to_string()} is not a geographic CRS (degrees)")
    return crs


def require_projected(crs):
    crs = resolve_crs(crs)
    if not crs.is_projected:
        raise ConfigurationError(
            f"{crs.to_string()} is not a projected CRS (metres)")
    return crs


def same_crs(a, b):
    """
    function to compare two CRS definitions, None never matches
    """
    if a is None or b is None:
        return False
    return resolve_crs(a) == resolve_crs(b)


def crs_label(crs):
    if crs is None:
        return "undefined"
    crs = resolve_crs(crs)
    epsg = crs.to_epsg()
    return f"EPSG:{epsg}" if epsg else crs.name

# -*- coding: utf-8 -*-
"""
created on: 2025-12-02
use:        exceptions raised by the site map pipeline
"""


class SiteMapError(Exception):
    """base class for all fatal pipeline errors"""


class ConfigurationError(SiteMapError):
    """invalid extent, unknown CRS code or bad style settings"""


class LoadError(SiteMapError):
    """incomplete shapefile, unreachable CSV or missing columns"""


class TransformationError(SiteMapError):
    """reprojection failed or layers do not share a CRS"""


class DataQualityError(SiteMapError):
    """site rows with missing or invalid coordinates"""

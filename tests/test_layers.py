"""Tests for loading, reprojecting and cropping the coastline layer."""

import geopandas as gpd
import pytest
from shapely.geometry import Point, Polygon, box

from sitemap.errors import LoadError, TransformationError
from sitemap.layers import (check_shapefile_components, crop_to_region,
                            load_vector_layer, reproject, write_vector_layer)


def polygons(geoms, names, crs=3005):
    return gpd.GeoDataFrame({"name": names}, geometry=geoms, crs=crs)


class TestCropToRegion:
    """Tests for crop_to_region."""

    def test_interior_polygon_unchanged(self, square_region):
        inside = Polygon([(1000, 1000), (3000, 1200), (2500, 4000), (1200, 3000)])
        layer = polygons([inside], ["islet"])

        cropped = crop_to_region(layer, square_region)

        assert len(cropped) == 1
        assert cropped.geometry.iloc[0].equals_exact(inside, tolerance=0)
        assert list(cropped.geometry.iloc[0].exterior.coords) == list(inside.exterior.coords)

    def test_exterior_polygon_removed(self, square_region):
        layer = polygons([box(20000, 20000, 25000, 25000)], ["far"])

        cropped = crop_to_region(layer, square_region)

        assert cropped.empty
        assert cropped.crs == layer.crs

    def test_interior_and_straddling(self, square_region):
        """One polygon inside and one across the edge give two pieces."""
        inside = box(1000, 1000, 3000, 3000)
        straddling = box(8000, 2000, 14000, 6000)
        layer = polygons([inside, straddling], ["islet", "headland"])
        layer["area_ha"] = [10.0, 240.0]

        cropped = crop_to_region(layer, square_region)

        assert len(cropped) == 2
        assert list(cropped["name"]) == ["islet", "headland"]
        assert cropped.geometry.iloc[0].equals(inside)

        clipped = cropped.geometry.iloc[1]
        assert clipped.equals(box(8000, 2000, 10000, 6000))
        assert cropped["area_ha"].iloc[1] == 240.0

    def test_split_polygon_duplicates_attributes(self, square_region, u_shape):
        layer = polygons([u_shape], ["bay"])
        layer["depth"] = [12]

        cropped = crop_to_region(layer, square_region)

        assert len(cropped) == 2
        assert list(cropped["name"]) == ["bay", "bay"]
        assert list(cropped["depth"]) == [12, 12]
        assert set(cropped.geom_type) == {"Polygon"}
        assert cropped.geometry.area.sum() == pytest.approx(2 * 2000 * 6000)

    def test_edge_contact_dropped(self, square_region):
        """A polygon that only touches the region boundary leaves no sliver."""
        touching = box(10000, 2000, 12000, 4000)
        layer = polygons([touching], ["neighbour"])

        cropped = crop_to_region(layer, square_region)

        assert cropped.empty

    def test_order_follows_source(self, square_region):
        layer = polygons([box(8000, 8000, 12000, 12000),
                          box(1000, 1000, 2000, 2000),
                          box(50000, 0, 51000, 1000),
                          box(4000, 4000, 5000, 5000)],
                         ["a", "b", "c", "d"])

        cropped = crop_to_region(layer, square_region)

        assert list(cropped["name"]) == ["a", "b", "d"]

    def test_invalid_polygon_repaired(self, square_region):
        bowtie = Polygon([(1000, 1000), (3000, 3000), (3000, 1000), (1000, 3000)])
        layer = polygons([bowtie], ["bowtie"])

        cropped = crop_to_region(layer, square_region)

        assert not cropped.empty
        assert cropped.geometry.is_valid.all()

    def test_repair_leaving_lines_keeps_polygon_part(self, square_region, spiked_square):
        layer = polygons([spiked_square], ["spit"])

        cropped = crop_to_region(layer, square_region)

        assert list(cropped["name"]) == ["spit"]
        assert set(cropped.geom_type) == {"Polygon"}
        assert cropped.geometry.area.sum() == pytest.approx(2000 * 2000)

    def test_crs_mismatch_fails(self, square_region):
        layer = polygons([box(1, 1, 2, 2)], ["x"], crs=4326)

        with pytest.raises(TransformationError):
            crop_to_region(layer, square_region)

    def test_input_not_modified(self, square_region):
        straddling = box(8000, 2000, 14000, 6000)
        layer = polygons([straddling], ["headland"])

        crop_to_region(layer, square_region)

        assert layer.geometry.iloc[0].equals(straddling)


class TestReproject:
    """Tests for reproject."""

    def test_reproject_keeps_attributes(self):
        layer = polygons([box(-125.2, 48.8, -125.1, 48.9)], ["bay"], crs=4326)
        layer["depth"] = [7]

        projected = reproject(layer, 3005)

        assert projected.crs.to_epsg() == 3005
        assert list(projected["name"]) == ["bay"]
        assert list(projected["depth"]) == [7]
        assert layer.crs.to_epsg() == 4326
        assert projected.total_bounds[0] > 1000

    def test_reproject_without_crs_fails(self):
        layer = gpd.GeoDataFrame({"name": ["x"]}, geometry=[box(0, 0, 1, 1)])

        with pytest.raises(TransformationError):
            reproject(layer, 3005)


class TestLoadVectorLayer:
    """Tests for shapefile loading."""

    def test_load(self, coastline_shapefile):
        layer = load_vector_layer(coastline_shapefile)

        assert len(layer) == 3
        assert layer.crs.to_epsg() == 4326
        assert list(layer["name"]) == ["island", "headland", "far"]

    def test_missing_index_file_fails(self, coastline_shapefile):
        coastline_shapefile.with_suffix(".shx").unlink()

        with pytest.raises(LoadError, match=r"coastline\.shx"):
            load_vector_layer(coastline_shapefile)

    def test_missing_projection_fails(self, coastline_shapefile):
        coastline_shapefile.with_suffix(".prj").unlink()

        with pytest.raises(LoadError, match=r"coastline\.prj"):
            check_shapefile_components(coastline_shapefile)

    def test_empty_projection_fails(self, tmp_path):
        path = tmp_path / "nocrs.shp"
        gpd.GeoDataFrame({"name": ["x"]}, geometry=[box(0, 0, 1, 1)]).to_file(
            path, driver="ESRI Shapefile", engine="fiona")
        path.with_suffix(".prj").write_text("")

        with pytest.raises(LoadError, match="coordinate reference system"):
            load_vector_layer(path)

    def test_points_rejected(self, tmp_path):
        path = tmp_path / "points.shp"
        gpd.GeoDataFrame({"name": ["x"]}, geometry=[Point(0, 0)],
                         crs=4326).to_file(path, driver="ESRI Shapefile",
                                           engine="fiona")

        with pytest.raises(LoadError, match="not polygons"):
            load_vector_layer(path)

    def test_missing_file_fails(self, tmp_path):
        with pytest.raises(LoadError):
            load_vector_layer(tmp_path / "nothing.shp")

    def test_write_then_load(self, tmp_path):
        layer = polygons([box(0, 0, 1000, 1000)], ["square"])

        path = write_vector_layer(layer, tmp_path / "out" / "square.shp")
        loaded = load_vector_layer(path)

        assert loaded.crs.is_projected
        assert loaded.geometry.iloc[0].equals(box(0, 0, 1000, 1000))

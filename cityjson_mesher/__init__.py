"""
CityJSON Mesher

Converts the boundary-representation geometry of CityJSON city objects
into indexed triangle meshes with per-mesh color and opacity.

Can be used as:
- CLI tool: python -m cityjson_mesher.main
- Library: load_cityjson() + convert_city_model() into any IModelSink
"""

__version__ = "0.1.0"
__author__ = "CityJSON Mesher Team"

"""
TopoJSON解码模块
将TopoJSON拓扑对象转换为GeoJSON要素，供Plotly等值区域图使用
"""

from typing import Any, Dict, List, Optional

Position = List[float]


class TopologyDecoder:
    """
    拓扑解码器

    功能：
    1. 解码量化（delta编码）和未量化的弧段
    2. 按弧段索引拼接线和环，负索引表示反向弧段
    3. 将几何对象组装为GeoJSON要素
    """

    def __init__(self, topology: Dict[str, Any]):
        """
        初始化解码器

        Args:
            topology: 已解析的TopoJSON字典
        """
        if topology.get("type") != "Topology":
            raise ValueError(f"不是有效的TopoJSON拓扑: type={topology.get('type')}")

        self.topology = topology
        self._scale: Optional[Position] = None
        self._translate: Optional[Position] = None

        transform = topology.get("transform")
        if transform:
            self._scale = list(transform["scale"])
            self._translate = list(transform["translate"])

        self.arcs = [self._decode_arc(arc) for arc in topology.get("arcs", [])]

    def _decode_arc(self, arc: List[List[float]]) -> List[Position]:
        """解码单条弧段，量化拓扑需要累加delta并做仿射变换"""
        if self._scale is None:
            return [list(point) for point in arc]

        sx, sy = self._scale
        tx, ty = self._translate
        x = y = 0
        decoded = []
        for point in arc:
            x += point[0]
            y += point[1]
            decoded.append([x * sx + tx, y * sy + ty] + list(point[2:]))
        return decoded

    def _decode_point(self, point: List[float]) -> Position:
        """解码点坐标（点坐标是绝对量化值，不做delta累加）"""
        if self._scale is None:
            return list(point)
        sx, sy = self._scale
        tx, ty = self._translate
        return [point[0] * sx + tx, point[1] * sy + ty] + list(point[2:])

    def line(self, arc_indexes: List[int]) -> List[Position]:
        """按弧段索引拼接一条线，相邻弧段共享端点只保留一次"""
        points: List[Position] = []
        for index in arc_indexes:
            if points:
                points.pop()
            if index < 0:
                arc_points = self.arcs[~index][::-1]
            else:
                arc_points = self.arcs[index]
            points.extend(list(p) for p in arc_points)

        # 退化线段至少需要两个点
        if len(points) < 2:
            points.append(list(points[0]))
        return points

    def ring(self, arc_indexes: List[int]) -> List[Position]:
        """拼接一个闭合环，点数不足4个时重复首点补齐"""
        points = self.line(arc_indexes)
        while len(points) < 4:
            points.append(list(points[0]))
        return points

    def geometry(self, obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        将拓扑几何对象转换为GeoJSON几何对象

        Args:
            obj: 拓扑几何对象

        Returns:
            Optional[Dict[str, Any]]: GeoJSON几何对象，空几何返回None
        """
        geom_type = obj.get("type")

        if geom_type is None:
            return None

        if geom_type == "GeometryCollection":
            return {
                "type": "GeometryCollection",
                "geometries": [self.geometry(g) for g in obj.get("geometries", [])],
            }

        if geom_type == "Point":
            coordinates: Any = self._decode_point(obj["coordinates"])
        elif geom_type == "MultiPoint":
            coordinates = [self._decode_point(p) for p in obj["coordinates"]]
        elif geom_type == "LineString":
            coordinates = self.line(obj["arcs"])
        elif geom_type == "MultiLineString":
            coordinates = [self.line(arcs) for arcs in obj["arcs"]]
        elif geom_type == "Polygon":
            coordinates = [self.ring(arcs) for arcs in obj["arcs"]]
        elif geom_type == "MultiPolygon":
            coordinates = [
                [self.ring(arcs) for arcs in polygon] for polygon in obj["arcs"]
            ]
        else:
            raise ValueError(f"不支持的几何类型: {geom_type}")

        return {"type": geom_type, "coordinates": coordinates}

    def feature(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        """将单个几何对象转换为GeoJSON要素"""
        result: Dict[str, Any] = {
            "type": "Feature",
            "properties": obj.get("properties") or {},
            "geometry": self.geometry(obj),
        }
        if "id" in obj:
            result["id"] = obj["id"]
        if "bbox" in obj:
            result["bbox"] = obj["bbox"]
        return result


def feature(topology: Dict[str, Any], obj: Any) -> Dict[str, Any]:
    """
    从拓扑中提取要素

    Args:
        topology: 已解析的TopoJSON字典
        obj: 拓扑对象或 objects 中的对象名称

    Returns:
        Dict[str, Any]: GeometryCollection返回FeatureCollection，否则返回Feature
    """
    if isinstance(obj, str):
        objects = topology.get("objects", {})
        if obj not in objects:
            raise KeyError(f"拓扑中不存在对象: {obj}")
        obj = objects[obj]

    decoder = TopologyDecoder(topology)

    if obj.get("type") == "GeometryCollection":
        return {
            "type": "FeatureCollection",
            "features": [decoder.feature(g) for g in obj.get("geometries", [])],
        }
    return decoder.feature(obj)

"""
图表事件处理模块
将Plotly选择事件（点击、框选、套索）转换为选择状态的变化
"""

import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from health_dashboard.selection.state import SelectionState
from health_dashboard.utils.logger import global_logger

Resolver = Callable[[Mapping[str, Any]], List[str]]


def default_resolver(point: Mapping[str, Any]) -> List[str]:
    """
    从选中点中读取FIPS代码

    优先读取 customdata（散点图和地图都把FIPS放在第一个位置），
    其次读取等值区域图的 location。
    """
    value = point.get("customdata")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        value = point.get("location")
    if value is None:
        return []
    return [str(value)]


class ChartEventHandler:
    """
    图表事件处理器

    Streamlit每次重跑都会返回组件当前的选择值，
    因此按组件key记录上一次的选择，只处理发生变化的事件。
    """

    def __init__(self):
        self._previous: Dict[str, Dict[str, Any]] = {}

    def reset(self) -> None:
        """清除所有组件的历史选择"""
        self._previous.clear()

    def handle(
        self,
        key: str,
        view: str,
        selection: Optional[Mapping[str, Any]],
        state: SelectionState,
        resolver: Optional[Resolver] = None,
        bin_mode: bool = False,
    ) -> bool:
        """
        处理一个图表组件的选择事件

        Args:
            key: 图表组件的key
            view: 视图名称（map, histogram, scatter）
            selection: Plotly选择数据，包含 points、box、lasso
            state: 要更新的选择状态
            resolver: 将选中点映射为FIPS列表的函数
            bin_mode: 为True时点击按直方图分箱切换

        Returns:
            bool: 选择状态是否发生变化
        """
        resolver = resolver or default_resolver
        selection = selection or {}

        groups = self._resolve_groups(selection.get("points") or [], resolver)
        is_brush = bool(selection.get("box")) or bool(selection.get("lasso"))
        signature = self._signature(groups, is_brush)

        previous = self._previous.get(key)
        if previous is not None and previous["signature"] == signature:
            return False
        self._previous[key] = {"signature": signature, "groups": groups, "brush": is_brush}

        before = state.copy()

        if is_brush:
            brushed = set()
            for group in groups:
                brushed.update(group)
            state.set_brushed(brushed)
            action = "BRUSH"
        else:
            previous_groups: List[Tuple[str, ...]] = []
            if previous is not None and previous["brush"]:
                state.clear_brush()
            elif previous is not None:
                previous_groups = previous["groups"]

            # 新出现的点为本次点击；选择被清空时撤销上一次点击
            toggled = [g for g in groups if g not in previous_groups]
            if not groups:
                toggled = previous_groups

            for group in toggled:
                if bin_mode:
                    state.toggle_bin(group)
                else:
                    for fips in group:
                        state.toggle_click(fips)
            action = "BIN" if bin_mode else "CLICK"

        changed = state != before
        if changed:
            global_logger.log_selection_change(action, view, state.clicked, state.brushed)
        return changed

    @staticmethod
    def _resolve_groups(
        points: List[Mapping[str, Any]], resolver: Resolver
    ) -> List[Tuple[str, ...]]:
        groups = []
        for point in points:
            group = tuple(sorted(resolver(point)))
            if group and group not in groups:
                groups.append(group)
        return groups

    @staticmethod
    def _signature(groups: List[Tuple[str, ...]], is_brush: bool) -> str:
        return json.dumps({"groups": sorted(groups), "brush": is_brush})

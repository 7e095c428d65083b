"""
选择状态模块
维护点击集合与刷选集合，计算三个视图共用的高亮规则
"""

from typing import Iterable, Set

import numpy as np
import pandas as pd


class SelectionState:
    """
    联动选择状态

    高亮规则：并集为空时全部高亮，否则仅高亮并集中的县。
    """

    def __init__(self):
        self.clicked: Set[str] = set()
        self.brushed: Set[str] = set()

    @property
    def union(self) -> Set[str]:
        """点击集合与刷选集合的并集"""
        return self.clicked | self.brushed

    @property
    def is_empty(self) -> bool:
        return not self.clicked and not self.brushed

    def toggle_click(self, fips: str) -> None:
        """切换单个县的点击状态"""
        if fips in self.clicked:
            self.clicked.discard(fips)
        else:
            self.clicked.add(fips)

    def toggle_bin(self, fips_codes: Iterable[str]) -> None:
        """
        切换直方图分箱的选择状态

        Args:
            fips_codes: 分箱内所有县的FIPS代码；全部已点击时取消，否则全部加入
        """
        codes = set(fips_codes)
        if not codes:
            return
        if codes <= self.clicked:
            self.clicked -= codes
        else:
            self.clicked |= codes

    def set_brushed(self, fips_codes: Iterable[str]) -> None:
        """用刷选区域内的县替换刷选集合"""
        self.brushed = set(fips_codes)

    def clear_brush(self) -> None:
        self.brushed = set()

    def clear(self) -> None:
        """清空点击集合和刷选集合"""
        self.clicked = set()
        self.brushed = set()

    def is_highlighted(self, fips: str) -> bool:
        return self.is_empty or fips in self.union

    def highlight_mask(self, fips: pd.Series) -> np.ndarray:
        """
        计算每个标记是否高亮

        Args:
            fips: FIPS代码序列

        Returns:
            np.ndarray: 布尔数组
        """
        if self.is_empty:
            return np.ones(len(fips), dtype=bool)
        return pd.Series(fips).isin(self.union).to_numpy()

    def opacity_for(
        self, fips: pd.Series, highlight: float = 1.0, dimmed: float = 0.25
    ) -> np.ndarray:
        """按高亮规则返回每个标记的透明度"""
        return np.where(self.highlight_mask(fips), highlight, dimmed)

    def copy(self) -> "SelectionState":
        other = SelectionState()
        other.clicked = set(self.clicked)
        other.brushed = set(self.brushed)
        return other

    def __eq__(self, other) -> bool:
        if not isinstance(other, SelectionState):
            return NotImplemented
        return self.clicked == other.clicked and self.brushed == other.brushed

    def __repr__(self) -> str:
        return (
            f"SelectionState(clicked={len(self.clicked)}, "
            f"brushed={len(self.brushed)})"
        )

"""
比例尺模块
提供量化颜色比例尺、刻度计算、直方图分箱和SI前缀格式化
"""

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from plotly.colors import sample_colorscale, sequential

# 刻度步长的误差阈值
E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)

SI_PREFIXES = ["y", "z", "a", "f", "p", "n", "µ", "m", "", "k", "M", "G", "T", "P", "E", "Z", "Y"]


@dataclass
class HistogramBin:
    """直方图分箱数据类"""

    x0: float
    x1: float
    count: int
    fips: List[str] = field(default_factory=list)
    selected: bool = False

    @property
    def midpoint(self) -> float:
        return (self.x0 + self.x1) / 2


def round_half_up(value: float) -> int:
    """四舍五入（.5向正无穷方向取整）"""
    return int(math.floor(value + 0.5))


def extent(values: Iterable[float]) -> Tuple[float, float]:
    """
    计算数值范围，忽略NaN

    Returns:
        Tuple[float, float]: (最小值, 最大值)，无有效值时返回 (nan, nan)
    """
    array = pd.to_numeric(pd.Series(list(values), dtype="object"), errors="coerce")
    array = array.dropna()
    if array.empty:
        return float("nan"), float("nan")
    return float(array.min()), float(array.max())


def _tick_params(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    if error >= E10:
        factor = 10
    elif error >= E5:
        factor = 5
    elif error >= E2:
        factor = 2
    else:
        factor = 1

    if power < 0:
        inc = math.pow(10, -power) / factor
        i1 = round_half_up(start * inc)
        i2 = round_half_up(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10, power) * factor
        i1 = round_half_up(start / inc)
        i2 = round_half_up(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_params(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """
    计算刻度步长

    Returns:
        float: 正数表示步长，负数表示步长的倒数取负（用于小于1的步长）
    """
    if count <= 0 or start == stop:
        return 0.0
    return _tick_params(start, stop, count)[2]


def ticks(start: float, stop: float, count: float = 10) -> List[float]:
    """
    生成“整齐”的刻度值（1、2、5乘以10的幂）

    Args:
        start: 起始值
        stop: 结束值
        count: 期望的刻度数量（近似值）

    Returns:
        List[float]: 位于 [start, stop] 内的刻度
    """
    if count <= 0 or math.isnan(start) or math.isnan(stop):
        return []
    if start == stop:
        return [float(start)]

    reverse = stop < start
    if reverse:
        start, stop = stop, start

    i1, i2, inc = _tick_params(start, stop, count)
    if i2 < i1:
        return []

    n = i2 - i1 + 1
    if inc < 0:
        result = [(i1 + i) / -inc for i in range(n)]
    else:
        result = [(i1 + i) * inc for i in range(n)]

    if reverse:
        result.reverse()
    return result


def nice_extent(domain: Tuple[float, float], count: int = 10) -> Tuple[float, float]:
    """
    将范围扩展到整齐的刻度边界

    Args:
        domain: 原始范围
        count: 期望的刻度数量

    Returns:
        Tuple[float, float]: 扩展后的范围
    """
    start, stop = domain
    if math.isnan(start) or math.isnan(stop):
        return start, stop

    reverse = stop < start
    if reverse:
        start, stop = stop, start

    prestep = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step

    return (stop, start) if reverse else (start, stop)


def blues_palette(n_colors: int = 9) -> List[str]:
    """返回n级ColorBrewer Blues顺序色板"""
    if n_colors == len(sequential.Blues):
        return list(sequential.Blues)
    return sample_colorscale("Blues", n_colors)


class QuantizeScale:
    """
    量化颜色比例尺

    将连续的定义域等分为 len(colors) 段，每段映射为一种颜色。
    """

    def __init__(self, domain: Tuple[float, float], colors: Sequence[str]):
        """
        初始化比例尺

        Args:
            domain: 定义域 (最小值, 最大值)
            colors: 输出颜色序列
        """
        if len(colors) < 1:
            raise ValueError("颜色序列不能为空")

        self.domain = (float(domain[0]), float(domain[1]))
        self.colors = list(colors)

        x0, x1 = self.domain
        n = len(self.colors) - 1
        self._thresholds = [((i + 1) * x1 - (i - n) * x0) / (n + 1) for i in range(n)]

    def thresholds(self) -> List[float]:
        return list(self._thresholds)

    def index(self, value) -> Optional[int]:
        """返回值所在的分段序号，缺失值返回None"""
        if value is None:
            return None
        try:
            value = float(value)
        except (TypeError, ValueError):
            return None
        if math.isnan(value):
            return None
        return bisect_right(self._thresholds, value)

    def __call__(self, value) -> Optional[str]:
        i = self.index(value)
        return None if i is None else self.colors[i]

    def invert_extent(self, color: str) -> Tuple[float, float]:
        """返回映射为指定颜色的取值区间"""
        i = self.colors.index(color)
        x0, x1 = self.domain
        lower = x0 if i == 0 else self._thresholds[i - 1]
        upper = x1 if i == len(self._thresholds) else self._thresholds[i]
        return lower, upper


def compute_bins(
    df: pd.DataFrame,
    attr: str,
    domain: Optional[Tuple[float, float]] = None,
    n_thresholds: int = 10,
) -> List[HistogramBin]:
    """
    计算直方图分箱

    Args:
        df: 包含 fips 列和属性列的数据
        attr: 属性列名
        domain: 分箱范围，None时使用属性值的范围
        n_thresholds: 期望的阈值数量

    Returns:
        List[HistogramBin]: 分箱列表，每个分箱为 [x0, x1)，最后一个分箱包含上界
    """
    values = pd.to_numeric(df[attr], errors="coerce")
    x0, x1 = domain if domain is not None else extent(values)
    if math.isnan(x0) or math.isnan(x1):
        return []

    thresholds = ticks(x0, x1, n_thresholds)
    thresholds = [t for t in thresholds if x0 < t < x1]

    edges = [x0] + thresholds + [x1]
    bins = [
        HistogramBin(x0=edges[i], x1=edges[i + 1], count=0)
        for i in range(len(edges) - 1)
    ]

    valid = values.notna() & (values >= x0) & (values <= x1)
    positions = np.searchsorted(thresholds, values[valid].to_numpy(), side="right")
    for fips, position in zip(df.loc[valid, "fips"], positions):
        bins[position].fips.append(fips)

    for hist_bin in bins:
        hist_bin.count = len(hist_bin.fips)
    return bins


def format_si(value, precision: int = 2) -> str:
    """
    按SI前缀格式化数值，保留precision位有效数字

    例如 22000 -> "22k"，0.5 -> "500m"，1.5 -> "1.5"
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        return "N/A"
    if math.isnan(value):
        return "N/A"

    sign = "-" if value < 0 else ""
    coefficient, exponent = f"{abs(value):.{precision - 1}e}".split("e")
    exponent = int(exponent)
    digits = coefficient.replace(".", "")

    prefix_exponent = max(-8, min(8, math.floor(exponent / 3))) * 3
    i = exponent - prefix_exponent + 1
    n = len(digits)

    if i == n:
        text = digits
    elif i > n:
        text = digits + "0" * (i - n)
    elif i > 0:
        text = digits[:i] + "." + digits[i:]
    else:
        # 超出前缀范围的极小值
        extra = f"{abs(value) / math.pow(10, prefix_exponent):.{max(0, precision + i - 1)}e}"
        text = "0." + "0" * (-i) + extra.split("e")[0].replace(".", "")

    return sign + text + SI_PREFIXES[8 + prefix_exponent // 3]

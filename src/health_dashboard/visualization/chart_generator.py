"""
图表生成模块
负责生成等值区域图、直方图和散点图，并按联动选择状态设置高亮样式
"""

import math
from typing import Any, Dict, List, Optional

import plotly.graph_objects as go
import pandas as pd
import numpy as np

from health_dashboard.config.config import DashboardConfig
from health_dashboard.data.attributes import get_display_name
from health_dashboard.selection.state import SelectionState
from health_dashboard.utils.helpers import format_value
from health_dashboard.visualization.scales import (
    HistogramBin,
    QuantizeScale,
    blues_palette,
    compute_bins,
    extent,
    format_si,
    nice_extent,
    round_half_up,
)


class ChartGenerator:
    """图表生成器类"""

    def __init__(self, config: Optional[DashboardConfig] = None):
        self.config = config or DashboardConfig()
        self.color_palette = {
            "bar": self.config.base_bar_color,  # 直方图默认蓝色
            "point": self.config.base_point_color,  # 散点默认橙色
            "highlight": self.config.highlight_color,  # 选中标记
            "missing": self.config.missing_color,  # 缺失值灰色
            "border": "#fff",
            "selected_border": "#333",
        }

    def create_color_scale(self, df: pd.DataFrame, attr: str) -> Optional[QuantizeScale]:
        """根据属性范围创建量化颜色比例尺，无有效值时返回None"""
        domain = extent(df[attr])
        if math.isnan(domain[0]):
            return None
        return QuantizeScale(domain, blues_palette(self.config.n_colors))

    def create_choropleth(
        self,
        df: pd.DataFrame,
        geojson: Dict[str, Any],
        attr: str,
        selection: Optional[SelectionState] = None,
    ) -> go.Figure:
        """
        创建县级等值区域图

        Args:
            df: 县级数据，包含 fips、display_name 和属性列
            geojson: 县界要素集合，要素id为5位FIPS
            attr: 着色属性
            selection: 联动选择状态

        Returns:
            go.Figure: Plotly图表对象
        """
        selection = selection or SelectionState()
        display_name = get_display_name(attr)
        title = f"Choropleth Map of {display_name}"

        feature_ids = [f.get("id") for f in geojson.get("features", []) if f.get("id")]
        if not feature_ids:
            return self._create_empty_chart("No county geometry available")

        # 以县界要素为准合并数据，数据中没有的县显示为灰色
        map_df = pd.DataFrame({"fips": feature_ids}).merge(
            df[["fips", "display_name", attr]], on="fips", how="left"
        )
        map_df["name"] = [
            name if isinstance(name, str) and name else f"FIPS: {fips}"
            for name, fips in zip(map_df["display_name"], map_df["fips"])
        ]
        map_df["hover"] = [
            f"<b>{name}</b><br>{display_name}: {format_value(value)}"
            for name, value in zip(map_df["name"], map_df[attr])
        ]

        scale = self.create_color_scale(df, attr)
        map_df["bucket"] = [
            scale.index(value) if scale is not None else None for value in map_df[attr]
        ]
        map_df["highlighted"] = selection.highlight_mask(map_df["fips"])
        map_df["opacity"] = np.where(
            map_df["highlighted"],
            self.config.highlight_opacity,
            self.config.dimmed_opacity,
        )

        # 选中的县排在最后绘制，使描边位于最上层
        selected = map_df["fips"].isin(selection.union)
        map_df = map_df.assign(_selected=selected).sort_values("_selected", kind="stable")
        is_missing = map_df["bucket"].isna()
        valued = map_df[~is_missing]

        fig = go.Figure()

        # 图层顺序：未选中的灰色县、着色县（选中的在末尾）、选中的灰色县
        fig.add_trace(self._missing_trace(geojson, map_df[is_missing & ~selected]))

        if scale is not None:
            n_colors = len(scale.colors)
            fig.add_trace(
                go.Choropleth(
                    geojson=geojson,
                    locations=valued["fips"],
                    z=valued["bucket"].astype(float),
                    zmin=-0.5,
                    zmax=n_colors - 0.5,
                    customdata=valued[["fips"]].to_numpy(),
                    hovertext=valued["hover"],
                    hoverinfo="text",
                    colorscale=self._stepped_colorscale(scale.colors),
                    colorbar=self._legend(scale),
                    marker=dict(
                        opacity=valued["opacity"].to_numpy(),
                        line=self._outline(valued["_selected"]),
                    ),
                    name=display_name,
                )
            )

        fig.add_trace(self._missing_trace(geojson, map_df[is_missing & selected]))

        fig.update_geos(
            scope="usa",
            projection_type="albers usa",
            showlakes=False,
            bgcolor="rgba(0,0,0,0)",
        )
        fig.update_layout(
            title=dict(text=title, x=0.5, xanchor="center"),
            width=self.config.map_width,
            height=self.config.map_height,
            margin=dict(l=10, r=10, t=50, b=10),
            clickmode="event+select",
            dragmode="select",
        )

        return fig

    def create_histogram(
        self,
        df: pd.DataFrame,
        attr: str,
        selection: Optional[SelectionState] = None,
        bins: Optional[List[HistogramBin]] = None,
    ) -> go.Figure:
        """
        创建属性分布直方图

        Args:
            df: 县级数据
            attr: 属性列名
            selection: 联动选择状态
            bins: 预先计算的分箱，None时按属性范围重新计算

        Returns:
            go.Figure: Plotly图表对象
        """
        selection = selection or SelectionState()
        display_name = get_display_name(attr)

        if bins is None:
            bins = self.compute_histogram_bins(df, attr, selection)
        if not bins:
            return self._create_empty_chart(f"No data available for {display_name}")

        colors = []
        opacities = []
        for hist_bin in bins:
            highlighted = selection.is_empty or hist_bin.selected
            colors.append(
                self.color_palette["highlight"]
                if hist_bin.selected
                else self.color_palette["bar"]
            )
            opacities.append(
                self.config.highlight_opacity if highlighted else self.config.dimmed_opacity
            )

        widths = [b.x1 - b.x0 for b in bins]
        # 定义域退化为单个值时使用Plotly默认宽度
        bar_width = [w * 0.98 for w in widths] if all(w > 0 for w in widths) else None
        fig = go.Figure(
            go.Bar(
                x=[b.midpoint for b in bins],
                y=[b.count for b in bins],
                width=bar_width,
                customdata=[[i] for i in range(len(bins))],
                hovertext=[
                    f"<b>Range:</b> {round_half_up(b.x0)} - {round_half_up(b.x1)}<br><b>Count:</b> {b.count}"
                    for b in bins
                ],
                hoverinfo="text",
                marker=dict(color=colors, opacity=opacities),
                name=display_name,
            )
        )

        fig.update_layout(
            title=dict(text=f"Histogram of {display_name}", x=0.5, xanchor="center"),
            xaxis_title=display_name,
            yaxis_title="Frequency",
            width=self.config.histogram_width,
            height=self.config.histogram_height,
            bargap=0,
            showlegend=False,
            clickmode="event+select",
            dragmode="select",
        )
        fig.update_xaxes(range=[bins[0].x0, bins[-1].x1])

        return fig

    def compute_histogram_bins(
        self,
        df: pd.DataFrame,
        attr: str,
        selection: Optional[SelectionState] = None,
    ) -> List[HistogramBin]:
        """计算分箱并按选择状态标记每个分箱是否选中"""
        selection = selection or SelectionState()
        bins = compute_bins(df, attr, n_thresholds=self.config.n_bins)
        union = selection.union
        for hist_bin in bins:
            hist_bin.selected = bool(union) and not union.isdisjoint(hist_bin.fips)
        return bins

    def create_scatterplot(
        self,
        df: pd.DataFrame,
        x_attr: str,
        y_attr: str,
        selection: Optional[SelectionState] = None,
    ) -> go.Figure:
        """
        创建两个属性的散点图

        Args:
            df: 县级数据
            x_attr: X轴属性
            y_attr: Y轴属性
            selection: 联动选择状态

        Returns:
            go.Figure: Plotly图表对象
        """
        selection = selection or SelectionState()
        x_name = get_display_name(x_attr)
        y_name = get_display_name(y_attr)

        # X轴和Y轴可以是同一个属性
        columns = list(dict.fromkeys(["fips", "display_name", x_attr, y_attr]))
        points = df[columns].dropna(
            subset=[x_attr, y_attr]
        )
        if points.empty:
            return self._create_empty_chart(f"No data available for {x_name} vs. {y_name}")

        points = points.assign(
            hover=[
                f"<b>{name}</b><br>{x_name}: {format_value(x)}<br>{y_name}: {format_value(y)}"
                for name, x, y in zip(points["display_name"], points[x_attr], points[y_attr])
            ],
            selected=points["fips"].isin(selection.union),
        )

        # 未选中的点在下层，选中的点单独一层绘制在上方
        base = points[~points["selected"]]
        chosen = points[points["selected"]]
        base_opacity = (
            self.config.highlight_opacity if selection.is_empty else self.config.dimmed_opacity
        )

        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=base[x_attr],
                y=base[y_attr],
                mode="markers",
                customdata=base[["fips"]].to_numpy(),
                hovertext=base["hover"],
                hoverinfo="text",
                marker=dict(color=self.color_palette["point"], size=6, opacity=base_opacity),
                name="Counties",
            )
        )
        fig.add_trace(
            go.Scatter(
                x=chosen[x_attr],
                y=chosen[y_attr],
                mode="markers",
                customdata=chosen[["fips"]].to_numpy(),
                hovertext=chosen["hover"],
                hoverinfo="text",
                marker=dict(
                    color=self.color_palette["highlight"],
                    size=6,
                    opacity=self.config.highlight_opacity,
                ),
                name="Selected",
            )
        )

        x_range = nice_extent(extent(points[x_attr]))
        y_range = nice_extent(extent(points[y_attr]))

        fig.update_layout(
            title=dict(text=f"{x_name} vs. {y_name}", x=0.5, xanchor="center"),
            xaxis_title=x_name,
            yaxis_title=y_name,
            width=self.config.scatter_width,
            height=self.config.scatter_height,
            showlegend=False,
            clickmode="event+select",
            dragmode="select",
        )
        fig.update_xaxes(range=list(x_range))
        fig.update_yaxes(range=list(y_range))

        return fig

    def legend_labels(self, scale: QuantizeScale) -> List[str]:
        """图例标签：每个颜色区间的下界，最后追加上界"""
        labels = [format_si(scale.invert_extent(color)[0]) for color in scale.colors]
        labels.append(format_si(scale.invert_extent(scale.colors[-1])[1]))
        return labels

    def _legend(self, scale: QuantizeScale) -> Dict[str, Any]:
        n_colors = len(scale.colors)
        return dict(
            orientation="h",
            x=1.0,
            xanchor="right",
            y=0.02,
            len=0.3,
            thickness=10,
            tickvals=[i - 0.5 for i in range(n_colors + 1)],
            ticktext=self.legend_labels(scale),
            tickfont=dict(size=10),
        )

    @staticmethod
    def _stepped_colorscale(colors: List[str]) -> List[List[Any]]:
        """将离散颜色转换为阶梯色阶，使每个分段保持单一颜色"""
        n = len(colors)
        colorscale = []
        for i, color in enumerate(colors):
            colorscale.append([i / n, color])
            colorscale.append([(i + 1) / n, color])
        return colorscale

    def _missing_trace(self, geojson: Dict[str, Any], frame: pd.DataFrame) -> go.Choropleth:
        """缺失值县的灰色图层"""
        missing_color = self.color_palette["missing"]
        return go.Choropleth(
            geojson=geojson,
            locations=frame["fips"],
            z=np.zeros(len(frame)),
            customdata=frame[["fips"]].to_numpy(),
            hovertext=frame["hover"],
            hoverinfo="text",
            colorscale=[[0, missing_color], [1, missing_color]],
            showscale=False,
            marker=dict(
                opacity=frame["opacity"].to_numpy(),
                line=self._outline(frame["_selected"]),
            ),
            name="N/A",
        )

    def _outline(self, selected: pd.Series) -> Dict[str, Any]:
        selected = selected.to_numpy(dtype=bool)
        return dict(
            color=np.where(
                selected, self.color_palette["selected_border"], self.color_palette["border"]
            ).tolist(),
            width=np.where(selected, 1.5, 0.5).tolist(),
        )

    def _create_empty_chart(self, message: str) -> go.Figure:
        """创建空图表用于错误处理"""
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            xanchor="center",
            yanchor="middle",
            showarrow=False,
            font=dict(size=16),
        )
        fig.update_layout(
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            height=200,
        )
        return fig

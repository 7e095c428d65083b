"""
健康属性定义
"""

from typing import Dict, List

# 属性代码名到显示名的映射，顺序即下拉框顺序
ATTRIBUTE_DISPLAY_NAMES: Dict[str, str] = {
    "poverty_perc": "Poverty Percent",
    "percent_smoking": "Percent Smoking",
    "median_household_income": "Median Household Income",
    "percent_stroke": "Percent Stroke",
}

NUMERIC_ATTRIBUTES: List[str] = list(ATTRIBUTE_DISPLAY_NAMES)


def get_display_name(attr: str) -> str:
    """返回属性的显示名，未知属性原样返回"""
    return ATTRIBUTE_DISPLAY_NAMES.get(attr, attr)

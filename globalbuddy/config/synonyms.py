"""
Built-in synonym table.

Each entry is a closed class of near-synonyms across the platform's working
languages. Terms must be single tokens (lowercase letters/digits only).
Override the whole table with ``Settings.synonyms_path``.
"""

from __future__ import annotations

DEFAULT_SYNONYM_CLASSES: dict[str, tuple[str, ...]] = {
    "dining": (
        "吃饭", "用餐", "就餐", "餐馆", "餐饮", "烹饪", "饭堂",
        "dining", "restaurant", "meal", "canteen",
    ),
    "housing": (
        "租房", "住宿", "公寓", "房源", "宿舍",
        "rent", "rental", "apartment", "dorm", "dormitory", "housing", "accommodation",
    ),
    "coursework": (
        "课程", "课表", "课堂", "教学", "选课",
        "course", "courses", "syllabus", "enrollment",
    ),
    "visa": (
        "签证", "移民", "入境", "海关", "居留证",
        "visa", "immigration", "customs",
    ),
    "secondhand": (
        "二手", "闲置", "转卖", "交易",
        "secondhand", "resale",
    ),
}

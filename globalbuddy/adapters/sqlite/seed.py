"""
Demo corpus - Three communities with one post each.

Usage:
    repo = SQLiteRepository(settings.db_path)
    await repo.initialize()
    await seed_database(repo)
"""

from __future__ import annotations

import logging
from typing import Any

from .repository import SQLiteRepository

logger = logging.getLogger(__name__)

__all__ = ["SEED_COMMUNITIES", "seed_database"]

# Each community carries the posts created in it
SEED_COMMUNITIES: list[dict[str, Any]] = [
    {
        "title": "中国人在泰国留学",
        "description": "分享签证、租房、美食攻略等信息",
        "country": "Thailand",
        "language": "zh",
        "tags": ["签证", "美食", "租房"],
        "created_by": "lihua",
        "posts": [
            {
                "author_id": "lihua",
                "title": "曼谷租房攻略",
                "body": "推荐在 BTS 线附近找公寓，注意提前准备押金，和房东确认水电费用。",
                "tags": ["租房", "曼谷"],
                "category": "生活",
            },
        ],
    },
    {
        "title": "英国人在韩国留学",
        "description": "学校申请、课程选择、生活分享",
        "country": "South Korea",
        "language": "en",
        "tags": ["课程", "生活", "语言"],
        "created_by": "emily",
        "posts": [
            {
                "author_id": "emily",
                "title": "延世大学选课技巧",
                "body": "热门课程要抢先注册，建议提前收藏课程。语言课和专业课都要合理搭配。",
                "tags": ["课程", "选课"],
                "category": "学习",
            },
        ],
    },
    {
        "title": "泰国人在中国留学",
        "description": "适应中国生活、二手交易、语言互助",
        "country": "China",
        "language": "zh",
        "tags": ["二手", "语言", "互助"],
        "created_by": "somchai",
        "posts": [
            {
                "author_id": "somchai",
                "title": "上海哪里吃泰餐",
                "body": "静安寺附近有很多泰国餐厅，想家时可以去吃。也欢迎大家一起组局做饭！",
                "tags": ["美食", "聚会"],
                "category": "社交",
            },
        ],
    },
]


async def seed_database(repo: SQLiteRepository, reset: bool = True) -> tuple[int, int]:
    """
    Load the demo corpus.

    Args:
        repo: Initialized repository
        reset: Delete existing communities and posts first

    Returns:
        (communities inserted, posts inserted)
    """
    if reset:
        await repo.clear()

    community_count = 0
    post_count = 0
    for community in SEED_COMMUNITIES:
        community_id = await repo.insert_community(
            title=community["title"],
            country=community["country"],
            description=community["description"],
            language=community["language"],
            tags=community["tags"],
            created_by=community["created_by"],
        )
        community_count += 1

        for post in community["posts"]:
            await repo.insert_post(community_id=community_id, **post)
            post_count += 1

    logger.info("Seeded %d communities, %d posts", community_count, post_count)
    return community_count, post_count

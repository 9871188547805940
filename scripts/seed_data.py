"""
가챠 샘플 데이터 시드 스크립트
경품 마스터, 판매 중인 가챠와 경품 풀을 초기 데이터로 설정
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gachaapi.database.session import get_db_context
from gachaapi.models.gacha import Gacha, GachaItem, Item

# (이름, 레어도, 포인트 환산율)
DEFAULT_ITEMS = [
    ("Holo Dragon Card", "SSR", 5000),
    ("Shiny Knight Card", "SR", 1200),
    ("Forest Sprite Card", "R", 300),
    ("Common Slime Card", "N", 50),
]

# 가챠별 경품 풀: 경품 이름 -> (가중치, 수량)
DEFAULT_GACHAS = [
    {
        "name": "Starter Oripa",
        "description": "Beginner friendly pack with a chance at a holo dragon.",
        "price": 500,
        "category": "card",
        "pool": {
            "Holo Dragon Card": (1, 1),
            "Shiny Knight Card": (2, 5),
            "Forest Sprite Card": (4, 20),
            "Common Slime Card": (8, 74),
        },
    },
    {
        "name": "Premium Oripa",
        "description": "Higher price, better odds.",
        "price": 3000,
        "category": "card",
        "pool": {
            "Holo Dragon Card": (2, 3),
            "Shiny Knight Card": (3, 12),
            "Forest Sprite Card": (3, 15),
        },
    },
]


def seed_gacha_data():
    """경품 / 가챠 / 경품 풀 시드 - 총 수량 = 경품 풀 수량 합계"""
    with get_db_context() as db:
        items = {}
        for name, rarity, rate in DEFAULT_ITEMS:
            item = db.query(Item).filter(Item.name == name).first()
            if item is None:
                item = Item(name=name, rarity=rarity, default_point_conversion_rate=rate)
                db.add(item)
                db.flush()
            items[name] = item

        for definition in DEFAULT_GACHAS:
            if db.query(Gacha).filter(Gacha.name == definition["name"]).first():
                print(f"⏭️  이미 존재: {definition['name']}")
                continue

            total = sum(quantity for _, quantity in definition["pool"].values())
            gacha = Gacha(
                name=definition["name"],
                description=definition["description"],
                price=definition["price"],
                category=definition["category"],
                current_stock=total,
                total_stock=total,
            )
            db.add(gacha)
            db.flush()

            for item_name, (weight, quantity) in definition["pool"].items():
                db.add(
                    GachaItem(
                        gacha_id=gacha.id,
                        item_id=items[item_name].id,
                        weight=weight,
                        remaining_quantity=quantity,
                    )
                )
            print(f"✅ 가챠 생성: {definition['name']} ({total}개, {definition['price']}P)")


if __name__ == "__main__":
    seed_gacha_data()

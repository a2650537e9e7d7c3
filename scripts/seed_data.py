"""
가상 선물 카탈로그 시드 스크립트

이미 있는 이름은 건너뜁니다. 거래에 사용된 선물의 가격은 바꾸지 않습니다.
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from promptcoin.database.session import get_db_context
from promptcoin.models.gifts import VirtualGift

DEFAULT_GIFTS = [
    ("Sparkle", "✨", 5),
    ("Heart", "❤️", 10),
    ("Palette", "🎨", 25),
    ("Trophy", "🏆", 50),
    ("Crown", "👑", 100),
    ("Rocket", "🚀", 250),
]


def seed_gift_catalog():
    """기본 선물 카탈로그 시드"""
    with get_db_context() as db:
        existing = {name for (name,) in db.query(VirtualGift.name).all()}

        added = 0
        for name, icon, coin_cost in DEFAULT_GIFTS:
            if name in existing:
                continue
            db.add(VirtualGift(name=name, icon=icon, coin_cost=coin_cost))
            added += 1

    print(f"✅ 선물 카탈로그 시드 완료: {added}개 추가, {len(existing)}개 유지")


if __name__ == "__main__":
    seed_gift_catalog()

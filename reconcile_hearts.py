"""Recompute articles.hearts from the article_likes table.

Usage: python reconcile_hearts.py [ARTICLE_ID]
"""

import logging
import sys

from creche_api.app.db.session import SessionLocal
from creche_api.app.services.articles import reconcile_hearts

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str]) -> int:
    article_id = int(argv[1]) if len(argv) > 1 else None
    db = SessionLocal()
    try:
        corrected = reconcile_hearts(db, article_id=article_id)
    finally:
        db.close()

    for fixed_id, (old, new) in sorted(corrected.items()):
        print(f"FIXED: article {fixed_id} hearts {old} -> {new}")
    print(f"Done. {len(corrected)} article(s) corrected.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))

from sqlalchemy import func

from models import db
from models.review import Review


def rating_summaries(studio_ids):
    """{studio_id: {"average", "count"}} computed from reviews on read."""
    summaries = {sid: {"average": 0, "count": 0} for sid in studio_ids}
    if not studio_ids:
        return summaries

    rows = (
        db.session.query(Review.studio_id, func.avg(Review.rating), func.count(Review.id))
        .filter(Review.studio_id.in_(studio_ids))
        .group_by(Review.studio_id)
        .all()
    )
    for studio_id, average, count in rows:
        summaries[studio_id] = {"average": round(float(average), 1), "count": count}
    return summaries


def rating_summary(studio_id: int):
    return rating_summaries([studio_id])[studio_id]

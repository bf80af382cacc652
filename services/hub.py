from models import Article, Complaint

HUB_SORTS = ("latest", "trending", "most-viewed")
HUB_FILTERS = ("all", "articles", "complaints")


def reaction_summary(complaint):
    summary = {"hearts": 0, "likes": 0, "thumbs_up": 0, "thumbs_down": 0}
    keys = {"heart": "hearts", "like": "likes", "thumbs_up": "thumbs_up", "thumbs_down": "thumbs_down"}
    for reaction in complaint.reactions:
        summary[keys[reaction.reaction_type]] += 1
    return summary


def engagement_score(reactions, comment_count):
    return (
        reactions["hearts"] + reactions["likes"] + reactions["thumbs_up"]
        - reactions["thumbs_down"] + comment_count
    )


def _article_item(article):
    return {
        "content_type": "article",
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "created_at": article.created_at,
        "view_count": article.view_count,
        "category": None,
        "barangay": None,
        "location": None,
        "status": None,
        "author_name": article.author.name if article.author else None,
        "image_url": article.images[0].image_url if article.images else None,
        "reactions": None,
        "comment_count": 0,
        "engagement": 0,
    }


def _complaint_item(complaint):
    reactions = reaction_summary(complaint)
    comment_count = len(complaint.comments)
    return {
        "content_type": "complaint",
        "id": complaint.id,
        "title": complaint.title,
        "content": complaint.content,
        "created_at": complaint.created_at,
        "view_count": complaint.view_count,
        "category": complaint.category,
        "barangay": complaint.barangay,
        "location": complaint.location,
        "status": complaint.status,
        "is_anonymous": complaint.is_anonymous,
        "author_name": complaint.author_name,
        "image_url": complaint.images[0].image_url if complaint.images else None,
        "reactions": reactions,
        "comment_count": comment_count,
        "engagement": engagement_score(reactions, comment_count),
    }


def hub_feed(sort="latest", kind="all", q=""):
    """Articles and public complaints in one list.

    ``latest`` orders by creation time, ``trending`` by engagement score and
    ``most-viewed`` by view count; ties fall back to newest first.
    """
    items = []
    if kind in ("all", "articles"):
        items.extend(_article_item(a) for a in Article.active().all())
    if kind in ("all", "complaints"):
        items.extend(_complaint_item(c) for c in Complaint.query.filter_by(is_public=True).all())

    q = (q or "").strip().lower()
    if q:
        items = [i for i in items if q in i["title"].lower() or q in i["content"].lower()]

    if sort == "trending":
        items.sort(key=lambda i: (i["engagement"], i["created_at"]), reverse=True)
    elif sort == "most-viewed":
        items.sort(key=lambda i: (i["view_count"], i["created_at"]), reverse=True)
    else:
        items.sort(key=lambda i: i["created_at"], reverse=True)

    for item in items:
        item["created_at"] = item["created_at"].isoformat()
    return items

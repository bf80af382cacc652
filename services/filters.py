def truthy(value):
    return str(value).lower() in ("1", "true", "on", "yes")


def filter_complaints(complaints, args):
    """Search / category / status / barangay filters for complaint lists."""
    q = (args.get("q") or "").strip().lower()
    category = args.get("category", "all")
    status = args.get("status", "all")
    barangay = args.get("barangay", "all")

    result = []
    for c in complaints:
        if q and not any(q in (field or "").lower() for field in (c.title, c.category, c.location, c.content)):
            continue
        if category != "all" and c.category != category:
            continue
        if status != "all" and c.status != status:
            continue
        if barangay != "all" and c.barangay != barangay:
            continue
        result.append(c)
    return result


def group_by_barangay(items):
    groups = {}
    for item in items:
        groups.setdefault(item.get("barangay") or "Unspecified", []).append(item)
    return groups

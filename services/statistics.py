"""Aggregate figures for the admin statistics page and the home dashboard.

Everything here works on rows that were already fetched; nothing queries the
database.
"""
import calendar
import io
import math
from datetime import datetime, timedelta
import pandas as pd
from models import COMPLAINT_STATUSES

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def _round(value):
    # half-up, not banker's rounding
    return int(math.floor(value + 0.5))


def _period_starts(now):
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)  # weeks start on Sunday
    month_start = today.replace(day=1)
    return today, week_start, month_start


def _last_months(now, count=12):
    months = []
    for i in range(count - 1, -1, -1):
        year, month = now.year, now.month - i
        while month <= 0:
            month += 12
            year -= 1
        months.append((year, month))
    return months


def complaints_frame(complaints):
    df = pd.DataFrame(
        [{
            "id": c.id,
            "title": c.title,
            "status": c.status,
            "category": c.category or "Other",
            "barangay": c.barangay or "Unspecified",
            "is_anonymous": bool(c.is_anonymous),
            "created_at": c.created_at,
            "updated_at": c.updated_at,
        } for c in complaints],
        columns=["id", "title", "status", "category", "barangay", "is_anonymous", "created_at", "updated_at"],
    )
    df["created_at"] = pd.to_datetime(df["created_at"])
    df["updated_at"] = pd.to_datetime(df["updated_at"])
    return df


def _breakdown(df, key):
    table = pd.crosstab(df[key], df["status"]).reindex(columns=list(COMPLAINT_STATUSES), fill_value=0)
    table["total"] = table.sum(axis=1)
    return table.sort_values("total", ascending=False, kind="stable")


def home_stats(statuses):
    """Counters for the home dashboard from a list of status strings."""
    total = len(statuses)
    pending = statuses.count("pending")
    processing = statuses.count("processing")
    solved = statuses.count("solved")
    return {
        "total": total,
        "pending": pending,
        "processing": processing,
        "solved": solved,
        "resolved_percentage": _round(solved / total * 100) if total else 0,
    }


def complaint_stats(complaints, now=None):
    now = now or datetime.utcnow()
    today, week_start, month_start = _period_starts(now)
    df = complaints_frame(complaints)
    total = len(df)
    counts = df["status"].value_counts()

    def status_count(status):
        return int(counts.get(status, 0))

    solved = status_count("solved")

    by_category, by_barangay = [], []
    if total:
        for name, row in _breakdown(df, "category").iterrows():
            by_category.append({
                "name": name,
                "value": int(row["total"]),
                "pending": int(row["pending"]),
                "solved": int(row["solved"]),
            })
        for name, row in _breakdown(df, "barangay").head(15).iterrows():
            by_barangay.append({
                "name": name,
                "total": int(row["total"]),
                "pending": int(row["pending"]),
                "processing": int(row["processing"]),
                "solved": int(row["solved"]),
            })

    by_month = []
    for year, month in _last_months(now):
        month_df = df[(df["created_at"].dt.year == year) & (df["created_at"].dt.month == month)]
        by_month.append({
            "name": calendar.month_abbr[month],
            "year": year,
            "month": month,
            "complaints": len(month_df),
            "solved": int((month_df["status"] == "solved").sum()),
            "pending": int((month_df["status"] == "pending").sum()),
        })

    day_counts = ((df["created_at"].dt.dayofweek + 1) % 7).value_counts()
    by_day_of_week = [{"name": DAY_NAMES[d], "value": int(day_counts.get(d, 0))} for d in range(7)]

    hour_counts = df["created_at"].dt.hour.value_counts()
    by_hour = [{"hour": f"{h:02d}:00", "value": int(hour_counts.get(h, 0))} for h in range(24)]

    last_month = by_month[-1]["complaints"]
    prev_month = by_month[-2]["complaints"]
    if last_month > prev_month:
        recent_trend = "up"
    elif last_month < prev_month:
        recent_trend = "down"
    else:
        recent_trend = "stable"
    trend_percentage = _round((last_month - prev_month) / prev_month * 100) if prev_month else 0

    solved_df = df[df["status"] == "solved"]
    avg_resolution_days = 0
    if len(solved_df):
        days = (solved_df["updated_at"] - solved_df["created_at"]).dt.total_seconds() / 86400
        avg_resolution_days = _round(days.mean() * 10) / 10

    peak_day = max(by_day_of_week, key=lambda d: d["value"])["name"] if total else ""
    peak_hour = max(by_hour, key=lambda h: h["value"])["hour"] if total else ""

    return {
        "total": total,
        "pending": status_count("pending"),
        "processing": status_count("processing"),
        "solved": solved,
        "rejected": status_count("rejected"),
        "anonymous": int(df["is_anonymous"].sum()) if total else 0,
        "today_complaints": int((df["created_at"] >= today).sum()),
        "this_week_complaints": int((df["created_at"] >= week_start).sum()),
        "this_month_complaints": int((df["created_at"] >= month_start).sum()),
        "by_category": by_category,
        "by_barangay": by_barangay,
        "by_month": by_month,
        "by_day_of_week": by_day_of_week,
        "by_hour": by_hour,
        "recent_trend": recent_trend,
        "trend_percentage": trend_percentage,
        "resolution_rate": _round(solved / total * 100) if total else 0,
        "avg_resolution_days": avg_resolution_days,
        "peak_day": peak_day,
        "peak_hour": peak_hour,
        "most_active_barangay": by_barangay[0]["name"] if by_barangay else "",
        "most_common_category": by_category[0]["name"] if by_category else "",
    }


def user_demographics(profiles):
    df = pd.DataFrame(
        [{"gender": p.gender or "Not Specified", "barangay": p.barangay or "Not Specified"} for p in profiles],
        columns=["gender", "barangay"],
    )
    genders = df["gender"].value_counts()
    barangays = df["barangay"].value_counts().head(10)
    return {
        "by_gender": [{"name": name[:1].upper() + name[1:], "value": int(v)} for name, v in genders.items()],
        "by_barangay": [{"name": name, "value": int(v)} for name, v in barangays.items()],
    }


def system_stats(profiles, complaints_total, agencies_total, hotlines_total, articles_total, now=None):
    now = now or datetime.utcnow()
    _, week_start, month_start = _period_starts(now)
    last_month_start = (month_start - timedelta(days=1)).replace(day=1)

    created = pd.to_datetime(pd.Series([p.created_at for p in profiles], dtype="object"))
    users_total = len(created)
    new_this_month = int((created >= month_start).sum())
    new_this_week = int((created >= week_start).sum())
    new_last_month = int(((created >= last_month_start) & (created < month_start)).sum())

    growth = _round((new_this_month - new_last_month) / new_last_month * 100) if new_last_month else 0
    per_user = _round(complaints_total / users_total * 100) / 100 if users_total else 0

    return {
        "total_users": users_total,
        "total_agencies": agencies_total,
        "total_hotlines": hotlines_total,
        "total_articles": articles_total,
        "new_users_this_month": new_this_month,
        "new_users_this_week": new_this_week,
        "user_growth_rate": growth,
        "complaint_per_user": per_user,
    }


def export_workbook(complaints, stats):
    """Write the statistics page as an Excel workbook, returns a BytesIO."""
    complaint_stats_ = stats["complaints"]
    system = stats["system"]

    df_summary = pd.DataFrame([
        {"Item": "Total complaints", "Count": complaint_stats_["total"]},
        {"Item": "Pending", "Count": complaint_stats_["pending"]},
        {"Item": "Processing", "Count": complaint_stats_["processing"]},
        {"Item": "Solved", "Count": complaint_stats_["solved"]},
        {"Item": "Rejected", "Count": complaint_stats_["rejected"]},
        {"Item": "Resolution rate (%)", "Count": complaint_stats_["resolution_rate"]},
        {"Item": "Avg. resolution (days)", "Count": complaint_stats_["avg_resolution_days"]},
        {"Item": "Users", "Count": system["total_users"]},
        {"Item": "Articles", "Count": system["total_articles"]},
        {"Item": "Hotlines", "Count": system["total_hotlines"]},
        {"Item": "Agencies", "Count": system["total_agencies"]},
    ])
    df_category = pd.DataFrame(complaint_stats_["by_category"], columns=["name", "value", "pending", "solved"])
    df_barangay = pd.DataFrame(
        complaint_stats_["by_barangay"], columns=["name", "total", "pending", "processing", "solved"]
    )
    df_month = pd.DataFrame(complaint_stats_["by_month"], columns=["name", "year", "complaints", "solved", "pending"])

    df_complaints = complaints_frame(complaints)
    df_complaints["created_at"] = df_complaints["created_at"].dt.strftime("%d/%m/%Y %H:%M")
    df_complaints["updated_at"] = df_complaints["updated_at"].dt.strftime("%d/%m/%Y %H:%M")

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        df_summary.to_excel(writer, index=False, sheet_name="Overview")
        df_category.to_excel(writer, index=False, sheet_name="By category")
        df_barangay.to_excel(writer, index=False, sheet_name="By barangay")
        df_month.to_excel(writer, index=False, sheet_name="By month")
        df_complaints.to_excel(writer, index=False, sheet_name="Complaints")

        workbook = writer.book
        worksheet = writer.sheets["Overview"]
        header_format = workbook.add_format({"bold": True, "bg_color": "#CCE5FF", "border": 1})
        for col_num, value in enumerate(df_summary.columns.values):
            worksheet.write(0, col_num, value, header_format)

    output.seek(0)
    return output

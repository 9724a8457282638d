import logging

import pandas as pd

from jobtrack.models.application import APPLICATION_STATUSES

logger = logging.getLogger(__name__)


def _pct(numerator: int, denominator: int) -> float:
    if not denominator:
        return 0.0
    return round(numerator / denominator * 100, 1)


def compute_analytics(applications: list) -> dict:
    """
    Aggregate a user's applications into status counts, weekly volume,
    funnel conversion rates and average days spent in the current stage.
    OA (online assessment) counts as an interview stage for conversions.
    """
    empty = {
        "status_counts": {},
        "apps_per_week": {},
        "conversion_rates": {"applied_to_interview": 0.0, "interview_to_offer": 0.0, "applied_to_offer": 0.0},
        "avg_time_in_stage": {},
        "total": 0,
    }
    if not applications:
        return empty

    df = pd.DataFrame(
        [
            {
                "status": a.status,
                "created_at": a.created_at,
                "updated_at": a.updated_at or a.created_at,
            }
            for a in applications
        ]
    )
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    df["updated_at"] = pd.to_datetime(df["updated_at"], utc=True)

    counts = df["status"].value_counts()
    status_counts = {s: int(counts[s]) for s in APPLICATION_STATUSES if s in counts.index}

    week_start = (df["created_at"].dt.tz_localize(None).dt.normalize()
                  - pd.to_timedelta(df["created_at"].dt.weekday, unit="D"))
    per_week = week_start.dt.strftime("%Y-%m-%d").value_counts().sort_index()
    apps_per_week = {str(k): int(v) for k, v in per_week.items()}

    applied = status_counts.get("APPLIED", 0)
    interview = status_counts.get("INTERVIEW", 0) + status_counts.get("OA", 0)
    offer = status_counts.get("OFFER", 0)

    df["days"] = (df["updated_at"] - df["created_at"]).dt.total_seconds() / 86400
    avg_days = df.groupby("status")["days"].mean()
    avg_time_in_stage = {str(s): round(float(v), 1) for s, v in avg_days.items()}

    return {
        "status_counts": status_counts,
        "apps_per_week": apps_per_week,
        "conversion_rates": {
            "applied_to_interview": _pct(interview, applied),
            "interview_to_offer": _pct(offer, interview),
            "applied_to_offer": _pct(offer, applied),
        },
        "avg_time_in_stage": avg_time_in_stage,
        "total": len(applications),
    }

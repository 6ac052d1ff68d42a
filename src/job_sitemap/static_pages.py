from __future__ import annotations

from job_sitemap.models import StaticPage

STATIC_PAGES: tuple[StaticPage, ...] = (
    StaticPage("", "daily", 1.0),
    StaticPage("/jobs", "hourly", 0.9),
    StaticPage("/companies", "daily", 0.8),
    StaticPage("/job-seekers", "weekly", 0.8),
    StaticPage("/employers", "weekly", 0.8),
    StaticPage("/talent-search", "daily", 0.7),
    StaticPage("/post-job", "monthly", 0.7),
    StaticPage("/pricing", "monthly", 0.6),
    StaticPage("/salary-estimator", "monthly", 0.7),
    StaticPage("/blog", "weekly", 0.7),
    StaticPage("/resources", "weekly", 0.6),
    StaticPage("/success-stories", "weekly", 0.6),
    StaticPage("/contact", "monthly", 0.5),
    StaticPage("/privacy", "yearly", 0.3),
    StaticPage("/terms", "yearly", 0.3),
    StaticPage("/cookies", "yearly", 0.3),
)

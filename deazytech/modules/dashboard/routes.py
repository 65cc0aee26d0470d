"""
Admin Dashboard Routes
======================

Landing page plus /admin/api/stats: per-resource totals with the number
added in the last month, and a merged feed of the most recent additions.
"""

from datetime import datetime, timedelta, timezone

from flask import current_app, jsonify, render_template

from . import dashboard_bp

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
RECENT_WINDOW = timedelta(days=30)
ACTIVITY_LIMIT = 5

# (repository, overview label, activity type)
STAT_SOURCES = (
    ('experts', 'Team Experts', 'expert'),
    ('services', 'Services', 'service'),
    ('industries', 'Industries', 'industry'),
    ('testimonials', 'Testimonials', 'testimonial'),
)


def _utcnow():
    # Storage timestamps are naive UTC (CURRENT_TIMESTAMP)
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _parse_timestamp(value):
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    try:
        return datetime.strptime(str(value)[:19], TIMESTAMP_FORMAT)
    except (TypeError, ValueError):
        return None


def format_time_ago(value, now=None):
    """Relative time: "just now", "N minute(s) ago", "N hour(s) ago", "N day(s) ago"."""
    moment = _parse_timestamp(value)
    if moment is None:
        return ''

    seconds = int(((now or _utcnow()) - moment).total_seconds())
    if seconds < 60:
        return 'just now'
    if seconds < 3600:
        count, unit = seconds // 60, 'minute'
    elif seconds < 86400:
        count, unit = seconds // 3600, 'hour'
    else:
        count, unit = seconds // 86400, 'day'
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def collect_stats(repositories, now=None):
    """Dashboard payload from the resource repositories"""
    now = now or _utcnow()
    since = (now - RECENT_WINDOW).strftime(TIMESTAMP_FORMAT)

    overview = []
    activity = []
    for name, label, activity_type in STAT_SOURCES:
        repo = repositories.get(name)
        if repo is None:
            continue
        overview.append({
            'label': label,
            'value': str(repo.count()),
            'change': f"+{repo.count(since=since)}",
            'trend': 'up',
        })
        for row in repo.recent(ACTIVITY_LIMIT):
            activity.append({
                'type': activity_type,
                'message': f"New {activity_type} '{row['label']}' was added",
                'created_at': _parse_timestamp(row['created_at']) or datetime.min,
            })

    activity.sort(key=lambda item: item['created_at'], reverse=True)
    recent = [
        {
            'type': item['type'],
            'message': item['message'],
            'time': format_time_ago(item['created_at'], now),
        }
        for item in activity[:ACTIVITY_LIMIT]
    ]

    return {'overview': overview, 'recentActivity': recent}


@dashboard_bp.route('/', strict_slashes=False)
@dashboard_bp.route('/dashboard')
def dashboard():
    """Admin dashboard"""
    stats = collect_stats(current_app.extensions['deazytech'].repositories)
    return render_template('dashboard/dashboard.html', stats=stats)


@dashboard_bp.route('/api/stats')
def get_stats():
    """Dashboard statistics as JSON"""
    return jsonify(collect_stats(current_app.extensions['deazytech'].repositories))

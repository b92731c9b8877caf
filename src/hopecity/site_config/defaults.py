"""Compiled-in default site configuration.

Used on a cold start, when the remote store is not configured, and whenever
a remote fetch fails.  Always hand out copies via :func:`default_config`;
the module constant must never be mutated.
"""

from __future__ import annotations

import copy

DEFAULT_CONFIG: dict = {
    "links": {
        "connectCard": "https://hopecity.elvanto.net/form/connect-card-uuid",
        "prayerRequest": "https://hopecity.elvanto.net/form/prayer-uuid",
        "giving": "https://tithe.ly/give_new/www/#/tithely/give-one-time/123456",
        "baptism": "https://hopecity.elvanto.net/form/baptism-uuid",
        "dreamTeam": "https://hopecity.elvanto.net/form/volunteer-uuid",
        "directions": "https://maps.google.com/?q=1700+Simpson+Ave+Sebring+FL+33870",
        "youtube": "https://www.youtube.com/channel/YOUR_CHANNEL_ID",
    },
    "socials": {
        "instagram": "#",
        "facebook": "#",
        "youtube": "#",
    },
    "announcement": {
        "active": True,
        "text": "\U0001f389 Easter Service Times: 9AM & 11AM. Plan your visit today!",
        "link": "#",
    },
    "events": [
        {
            "id": 1,
            "title": "Cultural Sunday & Potluck",
            "date": "Feb 22",
            "time": "10:00 AM",
            "signupUrl": "https://hopecity.elvanto.net/form/event-registration-1",
        },
        {
            "id": 2,
            "title": "Worship Night",
            "date": "Feb 28",
            "time": "6:30 PM",
            "signupUrl": "",
        },
        {
            "id": 3,
            "title": "Outreach: Nursing Ministry",
            "date": "Sundays",
            "time": "2:00 PM",
            "signupUrl": "https://hopecity.elvanto.net/form/outreach-signup",
        },
    ],
}


def default_config() -> dict:
    """Return a deep copy of :data:`DEFAULT_CONFIG`."""
    return copy.deepcopy(DEFAULT_CONFIG)

"""
Demo events used to seed an empty store
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional


def get_mock_events(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Return the demo event line-up, scheduled relative to ``now`` (naive UTC)."""
    now = now or datetime.utcnow()
    return [
        {
            "id": "techno-fest-01",
            "name": "Warehouse Echoes",
            "artist": "Synth System",
            "artist_bio": "Synth System is a pioneering duo known for their atmospheric techno soundscapes and driving rhythms. Formed in Berlin, they have played major festivals worldwide.",
            "venue": "The Steel Yard",
            "venue_details": "1 Industrial Way, Metro City. Capacity: 1500. Underground vibe, state-of-the-art sound system.",
            "latitude": 40.7128,
            "longitude": -74.0060,
            "date_time": now + timedelta(days=7),
            "ticket_price": 35.0,
            "ticket_url": "#",
            "description": "Experience the depths of techno with Synth System. A night of hypnotic beats and immersive visuals.",
            "image_url": "https://picsum.photos/seed/techno1/600/400",
            "giveaway_active": True,
            "giveaway_end_date": now + timedelta(days=3),
            "giveaway_tickets": 5,
        },
        {
            "id": "electro-night-02",
            "name": "Neon Circuit",
            "artist": "Voltage Vixen",
            "artist_bio": "Voltage Vixen electrifies crowds with her high-energy electro sets, blending classic sounds with futuristic bangers. A staple in the underground scene.",
            "venue": "Circuit Club",
            "venue_details": "25 Electric Ave, Metro City. Capacity: 800. Intimate venue with a focus on lighting and sound quality.",
            "latitude": 40.7580,
            "longitude": -73.9855,
            "date_time": now + timedelta(days=14),
            "ticket_price": 28.0,
            "ticket_url": "#",
            "description": "Get charged up with Voltage Vixen! An unforgettable night of pure electro energy.",
            "image_url": "https://picsum.photos/seed/electro2/600/400",
            "giveaway_active": False,
            "giveaway_end_date": None,
            "giveaway_tickets": None,
        },
        {
            "id": "house-party-03",
            "name": "Groove Sanctuary",
            "artist": "Rhythm Ritualist",
            "artist_bio": "Bringing soulful house vibes, Rhythm Ritualist creates uplifting sets that make you move. Feel-good music for feel-good people.",
            "venue": "The Loft",
            "venue_details": "Penthouse, 100 Skyline Dr, Metro City. Capacity: 300. Rooftop venue with city views.",
            "latitude": 40.748817,
            "longitude": -73.985428,
            "date_time": now + timedelta(days=21),
            "ticket_price": 40.0,
            "ticket_url": "#",
            "description": "Find your groove in the sanctuary. Uplifting house music all night long.",
            "image_url": "https://picsum.photos/seed/house3/600/400",
            "giveaway_active": True,
            "giveaway_end_date": now + timedelta(days=10),
            "giveaway_tickets": 2,
        },
        {
            "id": "dark-techno-04",
            "name": "Abyss",
            "artist": "Shadow Code",
            "artist_bio": "Shadow Code delves into the darker, industrial side of techno. Expect relentless beats and an intense atmosphere.",
            "venue": "The Bunker",
            "venue_details": "Basement, 50 Deep St, Metro City. Capacity: 500. Raw, industrial space.",
            "latitude": 40.7128,
            "longitude": -74.0060,
            "date_time": now + timedelta(days=10),
            "ticket_price": 30.0,
            "ticket_url": "#",
            "description": "Descend into the Abyss. A night of hard-hitting, dark techno.",
            "image_url": "https://picsum.photos/seed/darktechno4/600/400",
            "giveaway_active": False,
            "giveaway_end_date": None,
            "giveaway_tickets": None,
        },
    ]

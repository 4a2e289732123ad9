"""Demo roster served by the static data source.

Shaped like ``KOLCreate`` payloads plus a ``posts`` list of ``PostCreate``
payloads, so seeding goes through the same code path as manual entry.
Per-KOL totals are never stored here; they are derived from the posts.
"""
from __future__ import annotations

from typing import Any

DEMO_ROSTER: list[dict[str, Any]] = [
    {
        "name": "Crypto Wendy",
        "email": "wendy@crypto.com",
        "telegram_handle": "@cryptowendy",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "youtube", "profile_url": "https://youtube.com/@cryptowendy", "follower_count": 258000},
            {"platform": "tiktok", "profile_url": "https://tiktok.com/@cryptowendy", "follower_count": 299000},
        ],
        "documents": [
            {"name": "Wendy_MSA_2025.pdf", "size": 182044},
            {"name": "INV_wendy_october.pdf", "size": 40211},
        ],
        "posts": [
            {"platform": "youtube", "url": "https://youtube.com/watch?v=wendy01", "title": "Wallet deep dive", "posted_date": "2025-09-04", "impressions": 15000, "cost": 5000},
            {"platform": "youtube", "url": "https://youtube.com/watch?v=wendy02", "title": "Launch recap", "posted_date": "2025-09-18", "impressions": 12000, "cost": 4000},
            {"platform": "tiktok", "url": "https://tiktok.com/@cryptowendy/video/1", "posted_date": "2025-10-02", "impressions": 11700, "cost": 3000},
            {"platform": "tiktok", "url": "https://tiktok.com/@cryptowendy/video/2", "posted_date": "2025-10-16", "impressions": 11000, "cost": 3000},
        ],
    },
    {
        "name": "Joshua Jake",
        "email": "jake@influencer.io",
        "status": "in_contact",
        "kyc_completed": True,
        "platforms": [
            {"platform": "tiktok", "profile_url": "https://tiktok.com/@joshuajake", "follower_count": 705000},
        ],
    },
    {
        "name": "Rise Up Morning Show",
        "email": "show@riseup.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "tiktok", "profile_url": "https://tiktok.com/@riseupmorning", "follower_count": 365000},
            {"platform": "twitter", "profile_url": "https://twitter.com/riseupmorning", "follower_count": 120000},
        ],
        "posts": [
            {"platform": "tiktok", "url": "https://tiktok.com/@riseupmorning/video/1", "posted_date": "2025-08-11", "impressions": 30000, "cost": 2000},
            {"platform": "tiktok", "url": "https://tiktok.com/@riseupmorning/video/2", "posted_date": "2025-08-25", "impressions": 24500, "cost": 2000},
            {"platform": "twitter", "url": "https://twitter.com/riseupmorning/status/1", "posted_date": "2025-09-08", "impressions": 20000, "cost": 2000},
        ],
    },
    {
        "name": "Crypto with Leo",
        "email": "leo@crypto.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "youtube", "profile_url": "https://youtube.com/@cryptowithleo", "follower_count": 180000},
        ],
        # Organic mentions: reach but no spend
        "posts": [
            {"platform": "youtube", "url": "https://youtube.com/watch?v=leo01", "posted_date": "2025-07-30", "impressions": 16078},
            {"platform": "youtube", "url": "https://youtube.com/watch?v=leo02", "posted_date": "2025-08-14", "impressions": 15000},
        ],
    },
    {
        "name": "Jolly Green Investor",
        "email": "jolly@investor.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "tiktok", "profile_url": "https://tiktok.com/@jollygreen", "follower_count": 439000},
            {"platform": "instagram", "profile_url": "https://instagram.com/jollygreen", "follower_count": 89000},
        ],
        "posts": [
            {"platform": "tiktok", "url": "https://tiktok.com/@jollygreen/video/1", "posted_date": "2025-09-12", "impressions": 30000, "cost": 8000},
            {"platform": "instagram", "url": "https://instagram.com/p/jolly1", "posted_date": "2025-09-20", "impressions": 16759, "cost": 4000},
        ],
    },
    {
        "name": "Bodoggos",
        "email": "bodoggos@gmail.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "tiktok", "profile_url": "https://tiktok.com/@bodoggos", "follower_count": 520000},
        ],
        "documents": [
            {"name": "bodoggos_agreement_signed.pdf", "size": 96120},
        ],
        "posts": [
            {"platform": "tiktok", "url": "https://tiktok.com/@bodoggos/video/1", "posted_date": "2025-10-01", "impressions": 60000, "cost": 3333},
            {"platform": "tiktok", "url": "https://tiktok.com/@bodoggos/video/2", "posted_date": "2025-10-08", "impressions": 45300, "cost": 3333},
            {"platform": "tiktok", "url": "https://tiktok.com/@bodoggos/video/3", "posted_date": "2025-10-15", "impressions": 40000, "cost": 3333},
        ],
    },
    {
        "name": "Wale.Moca",
        "email": "wale@moca.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "twitter", "profile_url": "https://twitter.com/walemoca", "follower_count": 85000},
        ],
        "posts": [
            {"platform": "twitter", "url": "https://twitter.com/walemoca/status/1", "posted_date": "2025-09-29", "impressions": 15200, "cost": 2500},
        ],
    },
    {
        "name": "When Shift Happens",
        "status": "in_contact",
        "platforms": [
            {"platform": "youtube", "profile_url": "https://youtube.com/@whenshifthappens", "follower_count": 91000},
        ],
    },
    {
        "name": "Star Platinum",
        "email": "star@platinum.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "tiktok", "profile_url": "https://tiktok.com/@starplatinum", "follower_count": 125000},
        ],
        "posts": [
            {"platform": "tiktok", "url": "https://tiktok.com/@starplatinum/video/1", "posted_date": "2025-10-05", "impressions": 4300, "cost": 2500},
        ],
    },
    {
        "name": "Pix",
        "email": "pix@creator.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "instagram", "profile_url": "https://instagram.com/pix", "follower_count": 200000},
        ],
        "posts": [
            {"platform": "instagram", "url": "https://instagram.com/p/pix1", "posted_date": "2025-10-10", "impressions": 16400, "cost": 2500},
        ],
    },
    {
        "name": "Andrew Asks",
        "email": "andrew@asks.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "youtube", "profile_url": "https://youtube.com/@andrewasks", "follower_count": 150000},
        ],
        "posts": [
            {"platform": "youtube", "url": "https://youtube.com/watch?v=andrew01", "posted_date": "2025-09-02", "impressions": 6000, "cost": 1250},
            {"platform": "youtube", "url": "https://youtube.com/watch?v=andrew02", "posted_date": "2025-09-23", "impressions": 4000, "cost": 1250},
        ],
    },
    {
        "name": "Crypto Meg/Mason",
        "email": "meg@crypto.com",
        "status": "paid",
        "kyc_completed": True,
        "platforms": [
            {"platform": "tiktok", "profile_url": "https://tiktok.com/@cryptomeg", "follower_count": 320000},
            {"platform": "youtube", "profile_url": "https://youtube.com/@cryptomeg", "follower_count": 95000},
        ],
        "posts": [
            {"platform": "tiktok", "url": "https://tiktok.com/@cryptomeg/video/1", "posted_date": "2025-10-12", "impressions": 15300, "cost": 1000},
            {"platform": "youtube", "url": "https://youtube.com/watch?v=meg01", "posted_date": "2025-10-14", "impressions": 10000, "cost": 1000},
        ],
    },
]

__all__ = ["DEMO_ROSTER"]

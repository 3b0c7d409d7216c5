"""TEMPT Token API - signup, migration, waitlist and analytics backend.

Records user interest for the token launch site:
- services.subscribers: email signups for launch announcements
- services.migrations: ETH -> Solana migration registrations
- services.waitlist: ranked waitlist with referral credit
- services.analytics: cookie-free pageview analytics

Supporting modules:
- data.store: file-backed collections with per-collection write locks
- api: FastAPI routers and application factory
"""

__version__ = "1.0.0"

"""
Bakewind REST API.

Provides DRF views for:
- InternalOrder (CRUD + status, lock and stats actions)
- Lock cleanup per session
- Production demand, ingredients, schedules and schedule-from-order
- Recipe (read-only + scale preview)
"""

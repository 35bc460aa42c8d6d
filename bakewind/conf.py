"""
Bakewind Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    BAKEWIND = {
        "LOCK_TTL_SECONDS": 300,
        "LOCK_STORE": "bakewind.adapters.cache.CacheLockStore",
    }

    # Option 2: Flat
    BAKEWIND_LOCK_TTL_SECONDS = 300
    BAKEWIND_LOCK_STORE = "bakewind.adapters.cache.CacheLockStore"

All settings have sensible defaults, so no configuration is required.
"""

from django.conf import settings


# ── Defaults ──

DEFAULTS = {
    "LOCK_TTL_SECONDS": 300,
    "LOCK_STORE": "bakewind.adapters.memory.MemoryLockStore",
    "LOCK_CACHE_ALIAS": "default",
    "ORDER_NUMBER_PREFIX": "IO",
    "TENANT_HEADER": "X-Tenant",
    "SESSION_HEADER": "X-Session-Id",
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a bakewind setting.

    Looks up in order:
    1. BAKEWIND dict (e.g. BAKEWIND = {"LOCK_TTL_SECONDS": 120})
    2. Flat setting (e.g. BAKEWIND_LOCK_TTL_SECONDS = 120)
    3. DEFAULTS
    """
    bakewind_dict = getattr(settings, "BAKEWIND", {})
    if name in bakewind_dict:
        return bakewind_dict[name]

    flat_value = getattr(settings, f"BAKEWIND_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def build_lock_store():
    """Instantiate the configured LockStore."""
    from django.utils.module_loading import import_string

    return import_string(get_setting("LOCK_STORE"))()


def get_lock_registry():
    """Return the process-wide LockRegistry owned by the app config."""
    from django.apps import apps

    return apps.get_app_config("bakewind").lock_registry


def get_lock_manager(tenant):
    """Return the OrderLockManager for a tenant (instance or id)."""
    return get_lock_registry().for_tenant(tenant)

"""
api.tenancy - Tenant identity from the request.

The gateway in front of this service authenticates the caller and sets
the tenant header; the body never carries it.
"""

from __future__ import annotations

from typing import Optional

from flask import request

import config


def current_tenant() -> Optional[str]:
    tenant = request.headers.get(config.TENANT_HEADER, "").strip()
    return tenant or None

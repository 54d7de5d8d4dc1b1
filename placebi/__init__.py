"""
Placebi - Source Package

Daily bookkeeping for a single restaurant: revenue and expense entry,
a KPI dashboard and a naive short-term forecast.

DESIGN PRINCIPLES:
1. One restaurant, one local user, one persisted state blob
2. Fail early, fail visibly
3. The analytics engine is pure and never touches storage
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Placebi Team"

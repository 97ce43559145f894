"""
Endpoint subpackage.

Each module in this package defines an APIRouter for one domain
(users, chapters, memberships).  The routers are aggregated in
``api/router.py`` and mounted under the API prefix by ``main``.
"""

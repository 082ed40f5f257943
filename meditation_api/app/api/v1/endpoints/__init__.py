"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one domain; ``router.py`` at the
package level mounts them.
"""

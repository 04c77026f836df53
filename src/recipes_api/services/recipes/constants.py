"""Constants for the recipe service."""

from __future__ import annotations

from typing import Final


# Cache key (under the cache manager's prefix) holding the full listing.
LIST_CACHE_KEY: Final[str] = "all"
# Counter bumped by every mutation; a cached listing is valid only for the
# generation it was read under.
LIST_VERSION_KEY: Final[str] = "all:version"

RECIPE_RESOURCE: Final[str] = "Recipe"

RECIPE_UPDATED_MESSAGE: Final[str] = "Recipe has been updated"
RECIPE_DELETED_MESSAGE: Final[str] = "Recipe has been deleted"

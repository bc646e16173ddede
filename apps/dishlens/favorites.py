"""Per-device favourite dishes, one set per restaurant."""

from apps.dishlens.storage import LocalStorage


def favorites_key(slug: str) -> str:
    return f"dishlens:favs:{slug}"


def get_favorites(storage: LocalStorage, slug: str) -> set[str]:
    data = storage.get_json(favorites_key(slug))
    if not isinstance(data, list):
        return set()
    return {str(dish_id) for dish_id in data}


def set_favorites(storage: LocalStorage, slug: str, favorites: set[str]) -> bool:
    return storage.set_json(favorites_key(slug), sorted(favorites))


def toggle_favorite(storage: LocalStorage, slug: str, dish_id: str) -> set[str]:
    """Add or remove ``dish_id`` and return the updated set."""
    favorites = get_favorites(storage, slug)
    if dish_id in favorites:
        favorites.discard(dish_id)
    else:
        favorites.add(dish_id)
    set_favorites(storage, slug, favorites)
    return favorites

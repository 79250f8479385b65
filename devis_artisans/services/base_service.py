"""
Base commune des services : cache en mémoire et observateurs.
"""
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class Observable:
    """Gestion des observateurs prévenus après chaque modification."""

    def __init__(self):
        self.observers: List[Callable] = []

    def add_observer(self, callback):
        """Ajoute un observateur qui sera notifié des modifications."""
        self.observers.append(callback)

    def remove_observer(self, callback):
        """Supprime un observateur."""
        if callback in self.observers:
            self.observers.remove(callback)

    def notify_observers(self, payload):
        """Notifie tous les observateurs."""
        for callback in self.observers:
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Erreur notification observateur: {e}")


class CachedService(Observable):
    """
    Service adossé à une table, avec un cache en mémoire.

    La base fait foi au chargement ; ensuite le cache sert les lectures et
    chaque mutation le maintient cohérent avec la base, puis prévient les
    observateurs (typiquement l'interface, pour se redessiner).
    """

    def __init__(self, db):
        super().__init__()
        self.db = db
        self._items: List = []

    def get_all(self):
        """Retourne une copie de la liste en cache."""
        return list(self._items)

    def _find_index(self, item_id):
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def get_by_id(self, item_id):
        """Recherche en mémoire ; None si absent."""
        index = self._find_index(item_id)
        return self._items[index] if index is not None else None

    def _set_items(self, items):
        self._items = list(items)
        self.notify_observers(self.get_all())

    def _prepend(self, item):
        self._items.insert(0, item)
        self.notify_observers(self.get_all())

    def _replace(self, item):
        index = self._find_index(item.id)
        if index is None:
            self._items.insert(0, item)
        else:
            self._items[index] = item
        self.notify_observers(self.get_all())

    def _remove(self, item_id):
        self._items = [item for item in self._items if item.id != item_id]
        self.notify_observers(self.get_all())

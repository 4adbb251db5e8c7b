"""Stockage local des pièces d'identité.

Objectif du module
------------------
- Résoudre un chemin d'objet vers un fichier sous le répertoire racine configuré.
- Refuser tout chemin qui sortirait de ce répertoire.
"""

from pathlib import Path


class LocalDocumentStore:
    """Dépôt de documents adossé à un répertoire local."""

    def __init__(self, root: str | Path):
        """Initialise le dépôt sur le répertoire `root` (non créé s'il manque)."""
        self.root = Path(root).resolve()

    def open_path(self, object_path: str) -> Path | None:
        """Retourne le fichier correspondant, ou None s'il est absent ou hors racine."""
        candidate = (self.root / object_path).resolve()
        if not candidate.is_relative_to(self.root):
            return None
        if not candidate.is_file():
            return None
        return candidate

"""
storage.py
──────────
Persistance clé → valeur dans des fichiers JSON versionnés.

Chaque clé est stockée dans DATA_DIR/<clé>.json sous la forme :
    {"version": 1, "value": ...}

Ni load_value, ni load_list, ni save_value ne lèvent d'exception : un fichier absent,
illisible ou d'une autre version donne la valeur par défaut, une écriture
ratée est journalisée puis ignorée.
"""

import json
import logging
import os

from filelock import FileLock, Timeout

from constants import DATA_DIR, LOCK_TIMEOUT_SECONDS, SCHEMA_VERSION

logger = logging.getLogger(__name__)


def _data_path(key: str) -> str:
    return os.path.join(DATA_DIR, f"{key}.json")


def _lock_path(path: str) -> str:
    """Retourne le chemin du fichier de verrou associé à un fichier de données."""
    return path + ".lock"


def load_value(key: str, default, version: int = SCHEMA_VERSION):
    """
    Retourne la valeur stockée sous `key`, ou `default` si :
    - le fichier n'existe pas
    - le JSON est invalide ou n'a pas la forme {"version", "value"}
    - la version stockée diffère de `version`
    """
    path = _data_path(key)
    if not os.path.exists(path):
        return default
    try:
        with open(path, encoding="utf-8") as f:
            envelope = json.load(f)
        if envelope.get("version") != version:
            logger.warning(
                "Version %r ignorée pour la clé %r (attendue : %r)",
                envelope.get("version"), key, version,
            )
            return default
        return envelope["value"]
    except (OSError, ValueError, AttributeError, KeyError) as e:
        logger.warning("Lecture impossible de la clé %r : %s", key, e)
        return default


def save_value(key: str, value, version: int = SCHEMA_VERSION) -> None:
    """
    Écrit la valeur sous `key` de manière sécurisée :
    - Pose un verrou exclusif pendant l'écriture (plusieurs onglets/sessions)
    - Écrit dans un fichier temporaire puis le renomme : le fichier n'est
      jamais laissé à moitié écrit
    """
    path = _data_path(key)
    tmp_path = path + ".tmp"
    try:
        os.makedirs(DATA_DIR, exist_ok=True)
        with FileLock(_lock_path(path), timeout=LOCK_TIMEOUT_SECONDS):
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump({"version": version, "value": value}, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError, Timeout) as e:
        logger.warning("Écriture impossible de la clé %r : %s", key, e)
        # Fichier temporaire à moitié écrit : le fichier principal reste intact
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError as cleanup_error:
                logger.warning("Fichier temporaire non supprimé %r : %s", tmp_path, cleanup_error)


def load_list(key: str, version: int = SCHEMA_VERSION) -> list:
    """Comme load_value, mais garantit une liste : toute autre valeur donne []."""
    value = load_value(key, [], version)
    if not isinstance(value, list):
        logger.warning("Valeur ignorée pour la clé %r : liste attendue, %s trouvé",
                       key, type(value).__name__)
        return []
    return value

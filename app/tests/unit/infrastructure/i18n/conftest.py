"""Feature-level fixtures for i18n system tests.

Provides YAML catalogs on disk and stub collaborators for the response filter.
"""

from unittest.mock import MagicMock

import pytest
import yaml


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create temporary directory with sample YAML catalogs.

    Returns a directory structure like:
    - messages.fr.yml
    - extra.fr.yml
    - messages.de-DE.yml
    - context.fr-CA.yml
    - notes.yml (ignored: no language in name)
    """
    with open(tmp_path / "messages.fr.yml", "w", encoding="utf-8") as f:
        yaml.dump({"Welcome": "Bienvenue", "Sign in": "Se connecter"}, f, allow_unicode=True)

    with open(tmp_path / "extra.fr.yml", "w", encoding="utf-8") as f:
        yaml.dump({"Sign in": "Connexion", "Empty": None}, f, allow_unicode=True)

    with open(tmp_path / "messages.de-DE.yml", "w", encoding="utf-8") as f:
        yaml.dump({"Welcome": "Willkommen"}, f, allow_unicode=True)

    context_entries = [
        {"msgid": "Open", "comment": "verb", "msgstr": "Ouvrir"},
        {"msgid": "Open", "comment": "adjective", "msgstr": "Ouvert"},
        {"comment": "missing msgid"},
    ]
    with open(tmp_path / "context.fr-CA.yml", "w", encoding="utf-8") as f:
        yaml.dump(context_entries, f, allow_unicode=True)

    with open(tmp_path / "notes.yml", "w", encoding="utf-8") as f:
        yaml.dump({"ignored": "yes"}, f)

    return tmp_path


@pytest.fixture
def upper_nugget_localizer():
    """Nugget processor stub replacing "[[[x]]]" with x upper-cased."""
    localizer = MagicMock()
    localizer.process_nuggets.side_effect = lambda entity, languages: (
        entity.replace("[[[nugget]]]", "World").replace("[[[title]]]", "TITLE")
    )
    return localizer


class RecordingOutput:
    """Output transport recording every write and flush."""

    def __init__(self):
        self.writes = []
        self.flush_count = 0
        self.closed = False

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        self.flush_count += 1

    def close(self) -> None:
        self.closed = True

    @property
    def data(self) -> bytes:
        return b"".join(self.writes)


@pytest.fixture
def recording_output():
    return RecordingOutput()

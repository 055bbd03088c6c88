"""Translation repository interface and YAML implementation.

Defines the contract through which the text localizer discovers languages
and loads per-language message catalogs.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

import structlog
from infrastructure.i18n.exceptions import TranslationNotFoundError
from infrastructure.i18n.models import (
    Language,
    LanguageTag,
    Translation,
    TranslationItem,
    key_from_msgid_and_comment,
)

logger = structlog.get_logger()


class TranslationRepository(ABC):
    """Abstract source of translation catalogs.

    Implementations are called only while the text localizer populates its
    caches; exceptions propagate to the caller.
    """

    @abstractmethod
    def get_available_languages(self) -> List[Language]:
        """List every language that has a catalog."""
        pass

    @abstractmethod
    def translation_exists(self, langtag: str) -> bool:
        """Check whether any catalog exists for a language.

        Must be cheaper than get_translation().
        """
        pass

    @abstractmethod
    def get_translation(self, langtag: str) -> Translation:
        """Load the complete catalog for a language.

        Raises:
            TranslationNotFoundError: If no catalog exists for the language.
        """
        pass


class YAMLTranslationRepository(TranslationRepository):
    """Repository reading YAML catalogs named <domain>.<langtag>.yml.

    A file holds either a mapping of msgid to message:

        Hello world: Bonjour le monde

    or a list of entries carrying a disambiguating comment:

        - msgid: Open
          comment: verb
          msgstr: Ouvrir

    All files of a language are merged in file name order.

    Attributes:
        translations_dir: Directory containing the YAML files.
        use_comment_in_key: Whether entry comments take part in message keys.
    """

    FILE_PATTERNS = ("*.yml", "*.yaml")

    def __init__(self, translations_dir: Path, use_comment_in_key: bool = False):
        self.translations_dir = Path(translations_dir)
        self.use_comment_in_key = use_comment_in_key

        if not self.translations_dir.exists():
            raise ValueError(
                f"Translations directory not found: {self.translations_dir}"
            )

        logger.info(
            "initialized_yaml_repository",
            translations_dir=str(self.translations_dir),
            use_comment_in_key=use_comment_in_key,
        )

    def _catalog_files(self) -> Iterator[Tuple[LanguageTag, Path]]:
        files = set()
        for pattern in self.FILE_PATTERNS:
            files.update(self.translations_dir.glob(pattern))
        for path in sorted(files):
            # "messages.fr-CA.yml" -> "fr-CA", "fr-CA.yml" -> "fr-CA"
            langtag = LanguageTag.get_cached_instance(path.stem.split(".")[-1])
            if langtag is None:
                logger.debug("skipped_unrecognized_catalog", file=str(path))
                continue
            yield langtag, path

    def _files_for(self, langtag: str) -> List[Path]:
        wanted = LanguageTag.get_cached_instance(langtag)
        if wanted is None:
            return []
        return [path for tag, path in self._catalog_files() if tag == wanted]

    def get_available_languages(self) -> List[Language]:
        seen = []
        for langtag, _ in self._catalog_files():
            if langtag not in seen:
                seen.append(langtag)
        return [Language(language_short_tag=str(tag)) for tag in seen]

    def translation_exists(self, langtag: str) -> bool:
        return bool(self._files_for(langtag))

    def get_translation(self, langtag: str) -> Translation:
        files = self._files_for(langtag)
        if not files:
            raise TranslationNotFoundError(
                f"No translation files found for language {langtag} in {self.translations_dir}"
            )

        translation = Translation(
            language=Language(language_short_tag=str(LanguageTag.get_cached_instance(langtag)))
        )
        for path in files:
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.error("yaml_parse_error", file=str(path), error=str(e))
                raise ValueError(f"Failed to parse {path}: {e}") from e
            if data:
                self._merge_yaml_data(translation, data, path)

        logger.info(
            "loaded_translation",
            langtag=translation.language.language_short_tag,
            file_count=len(files),
            message_count=len(translation.items),
        )
        return translation

    def _merge_yaml_data(self, translation: Translation, data: Any, source_file: Path) -> None:
        if isinstance(data, dict):
            entries = [
                {"msgid": msgid, "msgstr": msgstr} for msgid, msgstr in data.items()
            ]
        elif isinstance(data, list):
            entries = data
        else:
            logger.warning(
                "invalid_yaml_format", file=str(source_file), expected="dict or list"
            )
            return

        for entry in entries:
            item = self._to_item(entry)
            if item is None:
                logger.warning("invalid_translation_entry", file=str(source_file))
                continue
            translation.items[item.msgkey] = item

    def _to_item(self, entry: Dict[str, Any]) -> Optional[TranslationItem]:
        if not isinstance(entry, dict) or entry.get("msgid") is None:
            return None
        msgid = str(entry["msgid"]).replace("\r\n", "\n")
        comment = entry.get("comment")
        msgstr = entry.get("msgstr")
        return TranslationItem(
            msgkey=key_from_msgid_and_comment(msgid, comment, self.use_comment_in_key),
            msgid=msgid,
            message="" if msgstr is None else str(msgstr),
            comment=comment,
        )

"""Tests for infrastructure.i18n.repository module."""

import pytest

from infrastructure.i18n import TranslationNotFoundError, YAMLTranslationRepository


class TestYAMLTranslationRepository:
    """Tests for YAMLTranslationRepository."""

    def test_initialization_with_missing_directory(self, tmp_path):
        """Repository raises ValueError for a missing directory."""
        with pytest.raises(ValueError, match="Translations directory not found"):
            YAMLTranslationRepository(tmp_path / "missing")

    def test_get_available_languages(self, temp_translations_dir):
        """Languages come from file names; files without a language are ignored."""
        repository = YAMLTranslationRepository(temp_translations_dir)
        tags = sorted(
            language.language_short_tag
            for language in repository.get_available_languages()
        )
        assert tags == ["de-DE", "fr", "fr-CA"]

    def test_translation_exists(self, temp_translations_dir):
        repository = YAMLTranslationRepository(temp_translations_dir)
        assert repository.translation_exists("fr")
        assert repository.translation_exists("de_de")
        assert not repository.translation_exists("de")
        assert not repository.translation_exists("not a tag")

    def test_get_translation_merges_files_in_name_order(self, temp_translations_dir):
        """Every file of a language is merged; later file names win."""
        repository = YAMLTranslationRepository(temp_translations_dir)
        messages = repository.get_translation("fr").to_messages()
        assert messages["Welcome"] == "Bienvenue"
        # extra.fr.yml is read before messages.fr.yml
        assert messages["Sign in"] == "Se connecter"

    def test_get_translation_null_message_is_empty(self, temp_translations_dir):
        repository = YAMLTranslationRepository(temp_translations_dir)
        assert repository.get_translation("fr").to_messages()["Empty"] == ""

    def test_get_translation_missing_language(self, temp_translations_dir):
        repository = YAMLTranslationRepository(temp_translations_dir)
        with pytest.raises(TranslationNotFoundError):
            repository.get_translation("ja")

    def test_list_entries_without_comment_keys(self, temp_translations_dir):
        """Entries sharing a msgid collapse when comments are not part of keys."""
        repository = YAMLTranslationRepository(temp_translations_dir)
        translation = repository.get_translation("fr-CA")
        assert list(translation.items) == ["Open"]

    def test_list_entries_with_comment_keys(self, temp_translations_dir):
        """Comments disambiguate keys; entries without msgid are skipped."""
        repository = YAMLTranslationRepository(temp_translations_dir, use_comment_in_key=True)
        translation = repository.get_translation("fr-CA")
        assert translation.to_messages() == {
            "Open///verb": "Ouvrir",
            "Open///adjective": "Ouvert",
        }
        assert translation.items["Open///verb"].msgid == "Open"
        assert translation.items["Open///verb"].comment == "verb"

    def test_crlf_msgids_are_normalized(self, tmp_path):
        with open(tmp_path / "messages.fr.yml", "w", encoding="utf-8") as f:
            f.write('"one\\r\\ntwo": "un\\ndeux"\n')
        repository = YAMLTranslationRepository(tmp_path)
        assert repository.get_translation("fr").to_messages() == {"one\ntwo": "un\ndeux"}

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        with open(tmp_path / "messages.fr.yml", "w", encoding="utf-8") as f:
            f.write("key: [unclosed\n")
        repository = YAMLTranslationRepository(tmp_path)
        with pytest.raises(ValueError, match="Failed to parse"):
            repository.get_translation("fr")

    def test_scalar_document_is_ignored(self, tmp_path):
        with open(tmp_path / "messages.fr.yml", "w", encoding="utf-8") as f:
            f.write("just a string\n")
        repository = YAMLTranslationRepository(tmp_path)
        assert repository.get_translation("fr").items == {}

    def test_bundled_catalogs_load(self):
        """The catalogs shipped with the application parse."""
        from infrastructure.i18n.factory import default_translations_dir

        repository = YAMLTranslationRepository(default_translations_dir())
        for language in repository.get_available_languages():
            assert repository.get_translation(language.language_short_tag).items

import pytest

from tests.factories.i18n import (
    FakeTranslationRepository,
    make_catalogs,
    make_text_localizer,
)


@pytest.fixture
def fake_repository():
    """Counting repository holding the sample French, fr-CA and German catalogs."""
    return FakeTranslationRepository(make_catalogs())


@pytest.fixture
def text_localizer(fake_repository):
    """TextLocalizer over the fake repository with an in-memory cache."""
    return make_text_localizer(repository=fake_repository)

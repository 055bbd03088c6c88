"""Language and translation models for the i18n system.

Defines language tags and match grades used for language negotiation, the
ranked user-language items built from request headers, and the data
structures returned by translation repositories.
"""

import re
from dataclasses import dataclass, field
from enum import IntEnum
from functools import lru_cache
from typing import Dict, List, Optional

from infrastructure.i18n.exceptions import InvalidLanguageTagError

# language[-Script][-REGION][-x-private]
_LANGTAG_PATTERN = re.compile(
    r"^(?P<language>[a-zA-Z]{2,3})"
    r"(?:-(?P<script>[a-zA-Z]{4}))?"
    r"(?:-(?P<region>[a-zA-Z]{2}|\d{3}))?"
    r"(?:-[xX]-(?P<private_use>[a-zA-Z0-9]{1,8}(?:-[a-zA-Z0-9]{1,8})*))?$"
)

MSGKEY_COMMENT_SEPARATOR = "///"


class MatchGrade(IntEnum):
    """Quality levels of a match between two language tags.

    Lower values are stricter. Language matching runs one pass per grade,
    from EXACT_MATCH up to the allowed ceiling.
    """

    EXACT_MATCH = 0
    DEFAULT_REGION = 1
    SCRIPT_MATCH = 2
    LANGUAGE_MATCH = 3

    @classmethod
    def max_match(cls) -> "MatchGrade":
        return cls.LANGUAGE_MATCH


# Pass number of the implicit fallback on the default language.
DEFAULT_FALLBACK_PASS = int(MatchGrade.max_match()) + 1


@dataclass(frozen=True)
class LanguageTag:
    """Normalized language tag (subset of BCP 47).

    Supports a language subtag (2-3 letters), an optional script (4 letters),
    an optional region (2 letters or 3 digits) and an optional private-use
    suffix, e.g. "en", "en-US", "zh-Hant-HK", "zh-Hant-HK-x-ABCD".

    Attributes:
        language: Lower-case language subtag.
        script: Title-case script subtag, if any.
        region: Upper-case region subtag, if any.
        private_use: Private-use subtags, if any.
    """

    language: str
    script: Optional[str] = None
    region: Optional[str] = None
    private_use: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        if self.private_use:
            parts.extend(["x", self.private_use])
        return "-".join(parts)

    @property
    def global_key(self) -> str:
        """Identifier of the language used when composing cache keys."""
        return f"po:{self}".lower()

    @classmethod
    def parse(cls, langtag: Optional[str], strict: bool = False) -> Optional["LanguageTag"]:
        """Parse a language tag string.

        Args:
            langtag: Tag such as "en-US" or "zh_Hant".
            strict: Raise instead of returning None on invalid input.

        Returns:
            LanguageTag, or None if the string is not a supported tag.

        Raises:
            InvalidLanguageTagError: If strict and the tag is invalid.
        """
        match = _LANGTAG_PATTERN.match((langtag or "").strip().replace("_", "-"))
        if not match:
            if strict:
                raise InvalidLanguageTagError(f"Invalid language tag: {langtag!r}")
            return None
        script = match.group("script")
        region = match.group("region")
        return cls(
            language=match.group("language").lower(),
            script=script.title() if script else None,
            region=region.upper() if region else None,
            private_use=match.group("private_use"),
        )

    @classmethod
    def get_cached_instance(cls, langtag) -> Optional["LanguageTag"]:
        """Return the shared instance for a tag string (or pass through a tag)."""
        if isinstance(langtag, LanguageTag):
            return langtag
        if not langtag:
            return None
        return _cached_langtag(str(langtag))

    def equals(self, other) -> bool:
        """Compare with another tag or a tag string."""
        return self == LanguageTag.get_cached_instance(other)

    def match(self, other: "LanguageTag", grade: MatchGrade) -> bool:
        """Test whether this tag matches another at the given grade."""
        if other is None or self.language != other.language:
            return False
        if grade == MatchGrade.EXACT_MATCH:
            return (
                self.script == other.script
                and self.region == other.region
                and self.private_use == other.private_use
            )
        scripts_compatible = (
            self.script == other.script or not self.script or not other.script
        )
        if grade == MatchGrade.DEFAULT_REGION:
            return scripts_compatible and (
                self.region == other.region or not self.region or not other.region
            )
        if grade == MatchGrade.SCRIPT_MATCH:
            return scripts_compatible
        return True


@lru_cache(maxsize=1024)
def _cached_langtag(langtag: str) -> Optional[LanguageTag]:
    return LanguageTag.parse(langtag)


@dataclass(frozen=True)
class LanguageItem:
    """One entry of a requester's ranked language preferences.

    Attributes:
        language_tag: The preferred language.
        quality: Preference weight (q-value); the language cookie uses 2.0.
        ordinal: Position in the original header, used to break ties.
    """

    language_tag: LanguageTag
    quality: float = 1.0
    ordinal: int = 0

    def __str__(self) -> str:
        return f"{self.language_tag};q={self.quality}"


def key_from_msgid_and_comment(
    msgid: Optional[str],
    msgcomment: Optional[str],
    use_comment: bool,
) -> Optional[str]:
    """Build the message key for a msgid and its disambiguating comment.

    The comment only takes part in the key when use_comment is enabled and
    the comment is non-empty.
    """
    if msgid is None:
        return None
    if not use_comment or not msgcomment:
        return msgid
    return f"{msgid}{MSGKEY_COMMENT_SEPARATOR}{msgcomment}"


@dataclass
class RequestContext:
    """Per-request values needed to localize a response.

    Attributes:
        user_languages: Ranked user languages of the request.
        principal_language: Language resolved as authoritative for the request.
        host: Host (and port) the request was addressed to.
        encoding: Text encoding declared for the response body.
        is_partial_update: Whether the body is a partial-page update fragment.
    """

    user_languages: List[LanguageItem] = field(default_factory=list)
    principal_language: Optional[LanguageTag] = None
    host: Optional[str] = None
    encoding: str = "utf-8"
    is_partial_update: bool = False


@dataclass(frozen=True)
class Language:
    """Language for which a repository holds translations."""

    language_short_tag: str
    english_name: Optional[str] = None


@dataclass(frozen=True)
class TranslationItem:
    """A single translated message."""

    msgkey: str
    msgid: str
    message: str
    comment: Optional[str] = None


@dataclass
class Translation:
    """Every translated message for one language, indexed by message key."""

    language: Language
    items: Dict[str, TranslationItem] = field(default_factory=dict)

    def to_messages(self) -> Dict[str, str]:
        """Flatten into the key -> text table stored in the cache."""
        return {key: item.message for key, item in self.items.items()}

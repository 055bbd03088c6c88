"""Nugget localization.

A nugget marks translatable text in response content:

    [[[Welcome back]]]
    [[[Hello %0, you have %1 messages|||Ann|||3]]]
    [[[Open///verb]]]
    [[[%0 of %1|||(((apples)))|||(((pears)))]]]

The msgid is resolved through the TextLocalizer; format items replace %0,
%1, ... in the resolved text, and items wrapped in parameter tokens are
translated themselves.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from core.config import I18nSettings
from core.logging import get_module_logger
from infrastructure.i18n.models import LanguageItem, LanguageTag
from infrastructure.i18n.translator import TextLocalizer

logger = get_module_logger()

_FORMAT_ITEM_PATTERN = re.compile(r"%(\d+)")


@dataclass(frozen=True)
class Nugget:
    """A parsed nugget."""

    msgid: str
    format_items: List[str] = field(default_factory=list)
    comment: Optional[str] = None


MessageTweaker = Callable[[Nugget, Optional[LanguageTag], str], str]


class NuggetLocalizer:
    """Replaces every nugget in a text with its localized message.

    Attributes:
        text_localizer: Resolver used for every msgid and translated item.
        message_tweaker: Optional hook called with each resolved message,
            e.g. to escape it for the output's content type.
    """

    def __init__(
        self,
        text_localizer: TextLocalizer,
        settings: I18nSettings,
        message_tweaker: Optional[MessageTweaker] = None,
    ):
        self.text_localizer = text_localizer
        self.message_tweaker = message_tweaker
        self.delimiter_token = settings.NUGGET_DELIMITER_TOKEN
        self.comment_token = settings.NUGGET_COMMENT_TOKEN
        self.parameter_begin_token = settings.NUGGET_PARAMETER_BEGIN_TOKEN
        self.parameter_end_token = settings.NUGGET_PARAMETER_END_TOKEN
        self._nugget_pattern = re.compile(
            re.escape(settings.NUGGET_BEGIN_TOKEN)
            + r"(.+?)"
            + re.escape(settings.NUGGET_END_TOKEN),
            re.DOTALL,
        )

    def parse_nugget(self, body: str) -> Nugget:
        """Split the text between nugget tokens into its parts."""
        comment = None
        if self.comment_token in body:
            body, comment = body.split(self.comment_token, 1)
        msgid, *format_items = body.split(self.delimiter_token)
        return Nugget(msgid=msgid, format_items=format_items, comment=comment or None)

    def process_nuggets(self, entity: str, languages: Sequence[LanguageItem]) -> str:
        """Localize every nugget in entity.

        Text without nuggets is returned unchanged.
        """
        if not entity:
            return entity

        def _replace(match: re.Match) -> str:
            nugget = self.parse_nugget(match.group(1))
            return self._localize(nugget, languages)

        return self._nugget_pattern.sub(_replace, entity)

    def _localize(self, nugget: Nugget, languages: Sequence[LanguageItem]) -> str:
        message, langtag = self.text_localizer.get_text(
            nugget.msgid, nugget.comment, languages
        )
        if message is None:
            message = nugget.msgid

        if nugget.format_items:
            items = [self._localize_item(item, languages) for item in nugget.format_items]

            def _format(match: re.Match) -> str:
                index = int(match.group(1))
                return items[index] if index < len(items) else match.group(0)

            message = _FORMAT_ITEM_PATTERN.sub(_format, message)

        if self.message_tweaker is not None:
            message = self.message_tweaker(nugget, langtag, message)

        return message

    def _localize_item(self, item: str, languages: Sequence[LanguageItem]) -> str:
        if item.startswith(self.parameter_begin_token) and item.endswith(
            self.parameter_end_token
        ):
            msgid = item[len(self.parameter_begin_token) : -len(self.parameter_end_token)]
            text, _ = self.text_localizer.get_text(msgid, None, languages)
            return msgid if text is None else text
        return item

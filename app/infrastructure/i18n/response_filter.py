"""Response filter localizing an outgoing response body.

The filter sits between the application and its output transport. It
buffers everything written to it and, when flushed, replaces nuggets and
optionally localizes same-host URLs before writing the result downstream.
Compressed bodies are detected from their first bytes and passed through
untouched.

The whole body is held in memory until flush().
"""

import codecs
from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from core.logging import get_module_logger
from infrastructure.i18n.models import RequestContext
from infrastructure.i18n.nuggets import NuggetLocalizer
from infrastructure.i18n.postback import AsyncPostbackParser
from infrastructure.i18n.urls import UrlLocalizer

logger = get_module_logger()

# Magic number opening a gzip stream.
GZIP_SIGNATURE = b"\x1f\x8b"


class OutputStream(Protocol):
    """Minimal writer the filter forwards data to."""

    def write(self, data: bytes) -> Any: ...

    def flush(self) -> Any: ...


class FilterState(Enum):
    """Lifecycle of a ResponseFilter."""

    BUFFERING = "buffering"
    COMPRESSED_PASSTHROUGH = "compressed_passthrough"
    FLUSHED = "flushed"


def resolve_encoding(charset: Optional[str], default: str = "utf-8") -> str:
    """Return the codec name for a charset, or default if unknown."""
    if not charset:
        return default
    try:
        return codecs.lookup(charset.strip().strip('"')).name
    except LookupError:
        logger.warning("unknown_response_charset", charset=charset, fallback=default)
        return default


class ResponseFilter:
    """Single-use localizing filter for one response.

    Only write() and flush() are intercepted. Any other operation on the
    transport goes straight to `output`.

    Attributes:
        output: Downstream transport.
        context: Languages, host and encoding of the request.
        nugget_localizer: Replaces nuggets; step skipped when None.
        url_localizer: Localizes URLs; step skipped when None.
        async_postback_types: Section types of partial-update fragments whose
            content is processed for nuggets.
        state: Current FilterState.
    """

    def __init__(
        self,
        output: OutputStream,
        context: RequestContext,
        nugget_localizer: Optional[NuggetLocalizer] = None,
        url_localizer: Optional[UrlLocalizer] = None,
        async_postback_types: Sequence[str] = (),
    ):
        self.output = output
        self.context = context
        self.nugget_localizer = nugget_localizer
        self.url_localizer = url_localizer
        self.async_postback_types = list(async_postback_types)
        self.state = FilterState.BUFFERING
        self._staging_buffer: Optional[bytearray] = bytearray()

    def write(self, data: bytes) -> None:
        """Buffer a block of the body, or forward it if the body is compressed."""
        if self.state is FilterState.COMPRESSED_PASSTHROUGH:
            self.output.write(data)
            return

        if self.state is FilterState.FLUSHED:
            raise ValueError("write to a response filter that was already flushed")

        if not self._staging_buffer and data[:2] == GZIP_SIGNATURE:
            logger.debug("response_filter_compressed_passthrough")
            self.state = FilterState.COMPRESSED_PASSTHROUGH
            self.output.write(data)
            return

        self._staging_buffer.extend(data)

    def flush(self) -> None:
        """Localize the buffered body and write it downstream.

        Exceptions raised by the nugget or URL localizer propagate.
        """
        if self.state is FilterState.COMPRESSED_PASSTHROUGH:
            self.output.flush()
            return

        if self.state is FilterState.FLUSHED:
            return

        encoding = self.context.encoding
        entity = self._staging_buffer.decode(encoding, errors="replace")
        self._staging_buffer = None

        if self.nugget_localizer is not None:
            entity = self._process_nuggets(entity)

        if self.url_localizer is not None:
            if self.context.principal_language is None:
                logger.debug("url_localization_skipped_no_principal_language")
            else:
                entity = self.url_localizer.process_outgoing(
                    entity,
                    str(self.context.principal_language),
                    self.context,
                )

        self.output.write(entity.encode(encoding, errors="replace"))
        self.output.flush()
        self.state = FilterState.FLUSHED

    def _process_nuggets(self, entity: str) -> str:
        languages = self.context.user_languages

        if self.context.is_partial_update and self._has_first_line(entity):
            try:
                parser = AsyncPostbackParser(entity)
            except ValueError as e:
                logger.warning("malformed_partial_update_fragment", error=str(e))
            else:
                for section_type in self.async_postback_types:
                    for section in parser.get_sections(section_type):
                        section.content = self.nugget_localizer.process_nuggets(
                            section.content, languages
                        )
                return str(parser)

        return self.nugget_localizer.process_nuggets(entity, languages)

    @staticmethod
    def _has_first_line(entity: str) -> bool:
        return bool(entity) and bool(entity.replace("\r", "").split("\n")[0].strip())

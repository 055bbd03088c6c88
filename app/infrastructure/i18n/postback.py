"""Parser for partial-page update fragments.

A fragment is a sequence of sections, each serialized as

    <length>|<type>|<id>|<content>|

where length is the number of characters in content. Sections can be edited
in place and the fragment re-serialized with recomputed lengths.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class PostbackSection:
    """One section of a partial-update fragment."""

    type: str
    id: str
    content: str

    def __str__(self) -> str:
        return f"{len(self.content)}|{self.type}|{self.id}|{self.content}|"


class AsyncPostbackParser:
    """Splits a partial-update fragment into sections.

    Raises:
        ValueError: If the fragment does not follow the section format.
    """

    def __init__(self, entity: str):
        self.sections: List[PostbackSection] = self._parse(entity)

    @staticmethod
    def _parse(entity: str) -> List[PostbackSection]:
        sections = []
        pos = 0
        while pos < len(entity):
            length_end = entity.find("|", pos)
            type_end = entity.find("|", length_end + 1) if length_end >= 0 else -1
            id_end = entity.find("|", type_end + 1) if type_end >= 0 else -1
            if id_end < 0:
                raise ValueError(f"Truncated section header at offset {pos}")

            length_field = entity[pos:length_end]
            if not length_field.isdigit():
                raise ValueError(f"Invalid section length {length_field!r} at offset {pos}")

            content_start = id_end + 1
            content_end = content_start + int(length_field)
            if entity[content_end : content_end + 1] != "|":
                raise ValueError(f"Section at offset {pos} is not terminated")

            sections.append(
                PostbackSection(
                    type=entity[length_end + 1 : type_end],
                    id=entity[type_end + 1 : id_end],
                    content=entity[content_start:content_end],
                )
            )
            pos = content_end + 1
        return sections

    def get_sections(self, section_type: str) -> List[PostbackSection]:
        """Get the sections of a type, in fragment order."""
        return [section for section in self.sections if section.type == section_type]

    def __str__(self) -> str:
        return "".join(str(section) for section in self.sections)

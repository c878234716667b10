"""
Embedded-file structures of an opened PDF.

These models describe where attached files live inside a document,
independently of the PDF library that produced them:

- NameTreeNode: one node of the /EmbeddedFiles name tree, with its
  direct (name, specification) entries and its child nodes, both in
  stored order.
- FileSpecification: a tagged variant, dispatched on ``kind``:
    * "complex"      carries embedded bytes in /EF slots
    * "unsupported"  any other specification form (skipped, not fatal)
- EmbeddedFile: a lazily-read embedded stream plus its declared
  MIME subtype.

Embedded bytes are never mutated. Reading them produces a new value.
"""

from __future__ import annotations

from typing import Annotated, Callable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EmbeddedFile(BaseModel):
    """An embedded file stream. Bytes are read on demand, once per call."""

    subtype: str = Field(
        "",
        description="Declared MIME type (stream /Subtype), empty if absent",
    )
    loader: Callable[[], bytes] = Field(..., exclude=True, repr=False)

    model_config = ConfigDict(frozen=True)

    def read_bytes(self) -> bytes:
        return self.loader()


class ComplexSpecification(BaseModel):
    """File specification dictionary carrying embedded file slots."""

    kind: Literal["complex"] = "complex"
    name: str = ""

    # /EF /F (locale-neutral) and /EF /UF (Unicode-named)
    file: Optional[EmbeddedFile] = None
    unicode_file: Optional[EmbeddedFile] = None

    model_config = ConfigDict(frozen=True)

    @property
    def embedded_file(self) -> Optional[EmbeddedFile]:
        if self.file is not None:
            return self.file
        return self.unicode_file


class UnsupportedSpecification(BaseModel):
    """Any file specification that does not carry embedded bytes."""

    kind: Literal["unsupported"] = "unsupported"
    form: str = Field(..., description="What the specification was, e.g. 'simple'")
    name: str = ""

    model_config = ConfigDict(frozen=True)


FileSpecification = Annotated[
    Union[ComplexSpecification, UnsupportedSpecification],
    Field(discriminator="kind"),
]


class NameTreeEntry(BaseModel):
    name: str
    specification: Optional[FileSpecification] = None

    model_config = ConfigDict(frozen=True)


class NameTreeNode(BaseModel):
    """
    A node of the embedded-files name tree.

    A node may have neither entries nor kids; both default to empty.
    """

    entries: List[NameTreeEntry] = Field(default_factory=list)
    kids: List["NameTreeNode"] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


NameTreeNode.model_rebuild()


__all__ = [
    "EmbeddedFile",
    "ComplexSpecification",
    "UnsupportedSpecification",
    "FileSpecification",
    "NameTreeEntry",
    "NameTreeNode",
]

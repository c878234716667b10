"""
PDF object-model access.

This module is the only place that talks to the PDF libraries:

- pikepdf for the document structure: page tree, /Names ->
  /EmbeddedFiles name tree, page annotations, embedded file streams
- pypdf for rendered page text

Everything returned to callers is expressed in the library-neutral models
of ``extractor.app.schemas.embedded_files``. Embedded file bytes stay
lazy: they are only read when a caller asks for them, which must happen
while the document is still open.

Resource lifetime:
    ``open_pdf`` is a scoped acquisition. All handles (the pikepdf
    document and the byte stream backing the pypdf reader) are released
    on every exit path, including exceptions and early returns.
"""

from __future__ import annotations

import io
import logging
from contextlib import ExitStack, contextmanager
from typing import Callable, Iterator, List, Optional, Set, Tuple

import pikepdf
import pypdf

from extractor.app.schemas.embedded_files import (
    ComplexSpecification,
    EmbeddedFile,
    FileSpecification,
    NameTreeEntry,
    NameTreeNode,
    UnsupportedSpecification,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Object mapping helpers
# ---------------------------------------------------------------------------

def _text(obj) -> str:
    if isinstance(obj, pikepdf.String):
        return str(obj)
    return ""


def _stream_loader(obj: pikepdf.Stream) -> Callable[[], bytes]:
    # A stream whose own filters cannot be decoded reads as empty.
    def load() -> bytes:
        try:
            return obj.read_bytes()
        except pikepdf.PdfError as exc:
            logger.warning(
                "Cannot decode embedded file stream %s: %s",
                obj.objgen,
                exc,
            )
            return b""

    return load


def _embedded_file(obj) -> Optional[EmbeddedFile]:
    if not isinstance(obj, pikepdf.Stream):
        return None

    subtype = obj.get("/Subtype")
    declared = str(subtype)[1:] if isinstance(subtype, pikepdf.Name) else ""

    return EmbeddedFile(subtype=declared, loader=_stream_loader(obj))


def file_specification(obj) -> Optional[FileSpecification]:
    """
    Map a PDF file specification object onto its tagged variant.

    - dictionary  -> ComplexSpecification with its /EF /F and /EF /UF slots
    - string      -> UnsupportedSpecification(form="simple")
    - null        -> None
    - other       -> UnsupportedSpecification(form=<object type>)
    """
    if obj is None:
        return None

    if isinstance(obj, pikepdf.Dictionary):
        name = _text(obj.get("/UF")) or _text(obj.get("/F"))

        file = unicode_file = None
        ef = obj.get("/EF")
        if isinstance(ef, pikepdf.Dictionary):
            file = _embedded_file(ef.get("/F"))
            unicode_file = _embedded_file(ef.get("/UF"))

        return ComplexSpecification(
            name=name,
            file=file,
            unicode_file=unicode_file,
        )

    if isinstance(obj, pikepdf.String):
        return UnsupportedSpecification(form="simple", name=str(obj))

    return UnsupportedSpecification(form=type(obj).__name__)


# ---------------------------------------------------------------------------
# Document handle
# ---------------------------------------------------------------------------

class PdfDocument:
    """
    An opened PDF.

    Instances are only valid inside the ``open_pdf`` block that produced
    them.
    """

    def __init__(
        self,
        pdf: pikepdf.Pdf,
        data: bytes,
        stack: ExitStack,
        *,
        sort_by_position: bool = True,
        max_name_tree_depth: int = 32,
    ) -> None:
        self._pdf = pdf
        self._data = data
        self._stack = stack
        self._sort_by_position = sort_by_position
        self._max_name_tree_depth = max_name_tree_depth
        self._reader: Optional[pypdf.PdfReader] = None

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    # ------------------------------------------------------------------
    # Embedded files name tree
    # ------------------------------------------------------------------

    def embedded_files(self) -> Optional[NameTreeNode]:
        """
        Return the root of the /EmbeddedFiles name tree, or None if the
        document has no such tree.
        """
        names = self._pdf.Root.get("/Names")
        if not isinstance(names, pikepdf.Dictionary):
            return None

        root = names.get("/EmbeddedFiles")
        if not isinstance(root, pikepdf.Dictionary):
            return None

        visited: Set[Tuple[int, int]] = set()
        if root.is_indirect:
            visited.add(root.objgen)

        return self._build_node(root, depth=1, visited=visited)

    def _build_node(
        self,
        node: pikepdf.Dictionary,
        depth: int,
        visited: Set[Tuple[int, int]],
    ) -> NameTreeNode:
        entries: List[NameTreeEntry] = []

        # /Names is a flat [key1 value1 key2 value2 ...] array.
        names_array = node.get("/Names")
        if isinstance(names_array, pikepdf.Array):
            for i in range(0, len(names_array) - 1, 2):
                entries.append(
                    NameTreeEntry(
                        name=_text(names_array[i]),
                        specification=file_specification(names_array[i + 1]),
                    )
                )

        kids: List[NameTreeNode] = []
        kids_array = node.get("/Kids")
        if isinstance(kids_array, pikepdf.Array) and len(kids_array) > 0:
            if depth >= self._max_name_tree_depth:
                logger.warning(
                    "Embedded files name tree exceeds depth %d; "
                    "not descending further",
                    self._max_name_tree_depth,
                )
            else:
                for kid in kids_array:
                    if not isinstance(kid, pikepdf.Dictionary):
                        continue
                    if kid.is_indirect:
                        if kid.objgen in visited:
                            logger.warning(
                                "Embedded files name tree revisits node %s; "
                                "skipping",
                                kid.objgen,
                            )
                            continue
                        visited.add(kid.objgen)
                    kids.append(self._build_node(kid, depth + 1, visited))

        return NameTreeNode(entries=entries, kids=kids)

    # ------------------------------------------------------------------
    # Page annotations
    # ------------------------------------------------------------------

    def attachment_annotations(self) -> Iterator[Optional[FileSpecification]]:
        """
        Yield the file specification of every /FileAttachment annotation,
        in page order and then in stored annotation order.
        """
        for page in self._pdf.pages:
            annots = page.obj.get("/Annots")
            if not isinstance(annots, pikepdf.Array):
                continue

            for annot in annots:
                if not isinstance(annot, pikepdf.Dictionary):
                    continue
                if annot.get("/Subtype") != pikepdf.Name.FileAttachment:
                    continue
                yield file_specification(annot.get("/FS"))

    # ------------------------------------------------------------------
    # Rendered page text
    # ------------------------------------------------------------------

    def _text_reader(self) -> pypdf.PdfReader:
        if self._reader is None:
            stream = self._stack.enter_context(io.BytesIO(self._data))
            self._reader = pypdf.PdfReader(stream)
        return self._reader

    def page_text(self, index: int) -> str:
        """
        Extract the rendered text of exactly one page (0-based index).

        With sort-by-position enabled, pypdf's layout mode orders text by
        its position on the page instead of content-stream order.
        Errors propagate to the caller.
        """
        page = self._text_reader().pages[index]

        if self._sort_by_position:
            return page.extract_text(extraction_mode="layout")
        return page.extract_text(extraction_mode="plain")


@contextmanager
def open_pdf(
    data: bytes,
    *,
    sort_by_position: bool = True,
    max_name_tree_depth: int = 32,
) -> Iterator[PdfDocument]:
    """
    Open PDF bytes as a scoped PdfDocument.

    Raises pikepdf.PdfError if the bytes are not a parsable PDF.
    """
    with ExitStack() as stack:
        pdf = stack.enter_context(pikepdf.open(io.BytesIO(data)))
        yield PdfDocument(
            pdf,
            data,
            stack,
            sort_by_position=sort_by_position,
            max_name_tree_depth=max_name_tree_depth,
        )

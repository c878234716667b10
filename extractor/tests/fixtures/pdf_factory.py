import gzip
import io
import json
import zipfile
from typing import Iterable, List, Optional, Sequence, Tuple

import pikepdf
from pikepdf import Array, Dictionary, Name, Stream, String


RECEIPT = {
    "merchant": "Corner Bakery",
    "issued_at": "2026-03-14T09:12:00Z",
    "total": "7.40",
    "currency": "EUR",
    "items": [
        {"name": "Croissant", "price": "2.20"},
        {"name": "Café au lait", "price": "5.20"},
    ],
}


def receipt_json() -> bytes:
    return json.dumps(RECEIPT, ensure_ascii=False, sort_keys=True).encode("utf-8")


# ------------------------------------------------------------------
# Payload helpers
# ------------------------------------------------------------------

def gzip_bytes(data: bytes) -> bytes:
    return gzip.compress(data)


def zip_bytes(entries: Sequence[Tuple[str, bytes]]) -> bytes:
    """
    Build a zip archive with entries in the given order.

    Names ending in "/" are written as directory entries.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries:
            if name.endswith("/"):
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, data)
    return buffer.getvalue()


# ------------------------------------------------------------------
# PDF building blocks
# ------------------------------------------------------------------

def _save(pdf: pikepdf.Pdf, **options) -> bytes:
    buffer = io.BytesIO()
    pdf.save(buffer, **options)
    return buffer.getvalue()


def _add_text_page(pdf: pikepdf.Pdf, text: str) -> pikepdf.Page:
    page = pdf.add_blank_page(page_size=(595, 842))

    font = pdf.make_indirect(
        Dictionary(
            Type=Name.Font,
            Subtype=Name.Type1,
            BaseFont=Name.Helvetica,
            Encoding=Name.WinAnsiEncoding,
        )
    )

    page.Resources = Dictionary(Font=Dictionary(F1=font))
    page.Contents = pdf.make_indirect(
        Stream(
            pdf,
            f"BT /F1 12 Tf 72 760 Td ({text}) Tj ET".encode("cp1252"),
        )
    )
    return page


def _filespec(
    pdf: pikepdf.Pdf,
    filename: str,
    data: bytes,
    mime_type: Optional[str] = None,
    slot: str = "F",
) -> pikepdf.Dictionary:
    embedded = pdf.make_indirect(Stream(pdf, data))
    embedded.Type = Name.EmbeddedFile
    if mime_type:
        embedded.Subtype = Name("/" + mime_type)

    return pdf.make_indirect(
        Dictionary(
            Type=Name("/Filespec"),
            F=filename,
            UF=filename,
            EF=Dictionary({"/" + slot: embedded}),
        )
    )


# ------------------------------------------------------------------
# Documents
# ------------------------------------------------------------------

def text_pdf(pages: Iterable[str]) -> bytes:
    """Plain PDF, one Helvetica text line per page, no attachments."""
    with pikepdf.new() as pdf:
        for text in pages:
            _add_text_page(pdf, text)
        return _save(pdf)


def embedded_files_pdf(
    files: Sequence[Tuple[str, bytes, Optional[str]]],
    pages: Iterable[str] = ("Thank you for your purchase",),
) -> bytes:
    """PDF whose /EmbeddedFiles name tree is a single leaf node."""
    with pikepdf.new() as pdf:
        for text in pages:
            _add_text_page(pdf, text)

        names: List = []
        for filename, data, mime_type in files:
            names.append(String(filename))
            names.append(_filespec(pdf, filename, data, mime_type))

        pdf.Root["/Names"] = Dictionary(
            EmbeddedFiles=Dictionary(Names=Array(names))
        )
        return _save(pdf)


def name_tree_with_kids_pdf(
    kids: Sequence[Sequence[Tuple[str, bytes, Optional[str]]]],
    pages: Iterable[str] = ("Receipt",),
) -> bytes:
    """PDF whose /EmbeddedFiles root only has /Kids, one leaf per group."""
    with pikepdf.new() as pdf:
        for text in pages:
            _add_text_page(pdf, text)

        kid_nodes = []
        for group in kids:
            names: List = []
            for filename, data, mime_type in group:
                names.append(String(filename))
                names.append(_filespec(pdf, filename, data, mime_type))
            kid_nodes.append(pdf.make_indirect(Dictionary(Names=Array(names))))

        pdf.Root["/Names"] = Dictionary(
            EmbeddedFiles=pdf.make_indirect(Dictionary(Kids=Array(kid_nodes)))
        )
        return _save(pdf)


def nested_name_tree_pdf(depth: int, data: bytes, mime_type: str) -> bytes:
    """
    PDF whose only embedded file sits in a leaf ``depth`` levels below
    the name tree root (root is level 1).
    """
    with pikepdf.new() as pdf:
        _add_text_page(pdf, "Nested")

        node = pdf.make_indirect(
            Dictionary(
                Names=Array(
                    [String("deep.json"), _filespec(pdf, "deep.json", data, mime_type)]
                )
            )
        )
        for _ in range(depth - 1):
            node = pdf.make_indirect(Dictionary(Kids=Array([node])))

        pdf.Root["/Names"] = Dictionary(EmbeddedFiles=node)
        return _save(pdf)


def simple_filespec_pdf(pages: Iterable[str] = ("Simple",)) -> bytes:
    """Name tree entry whose value is a plain string file specification."""
    with pikepdf.new() as pdf:
        for text in pages:
            _add_text_page(pdf, text)

        pdf.Root["/Names"] = Dictionary(
            EmbeddedFiles=Dictionary(
                Names=Array([String("receipt.json"), String("receipt.json")])
            )
        )
        return _save(pdf)


def attachment_annotation_pdf(
    annotations_per_page: Sequence[Sequence[Tuple[str, bytes, Optional[str]]]],
    embedded: Sequence[Tuple[str, bytes, Optional[str]]] = (),
) -> bytes:
    """
    One page per entry of ``annotations_per_page``, each carrying a
    /FileAttachment annotation per file, plus an optional link annotation
    before them. ``embedded`` files go into the name tree.
    """
    with pikepdf.new() as pdf:
        for index, files in enumerate(annotations_per_page):
            page = _add_text_page(pdf, f"Page {index + 1}")

            annots = [
                pdf.make_indirect(
                    Dictionary(
                        Type=Name.Annot,
                        Subtype=Name.Link,
                        Rect=Array([0, 0, 10, 10]),
                    )
                )
            ]
            for filename, data, mime_type in files:
                annots.append(
                    pdf.make_indirect(
                        Dictionary(
                            Type=Name.Annot,
                            Subtype=Name.FileAttachment,
                            Rect=Array([20, 20, 40, 40]),
                            FS=_filespec(pdf, filename, data, mime_type),
                        )
                    )
                )
            page.Annots = Array(annots)

        if embedded:
            names: List = []
            for filename, data, mime_type in embedded:
                names.append(String(filename))
                names.append(_filespec(pdf, filename, data, mime_type))
            pdf.Root["/Names"] = Dictionary(
                EmbeddedFiles=Dictionary(Names=Array(names))
            )

        return _save(pdf)


def unicode_slot_pdf(data: bytes, mime_type: Optional[str] = None) -> bytes:
    """Embedded file stored only in the /EF /UF slot."""
    with pikepdf.new() as pdf:
        _add_text_page(pdf, "Unicode slot")

        filespec = _filespec(pdf, "receipt.json", data, mime_type, slot="UF")
        pdf.Root["/Names"] = Dictionary(
            EmbeddedFiles=Dictionary(
                Names=Array([String("receipt.json"), filespec])
            )
        )
        return _save(pdf)


def undecodable_stream_pdf(
    raw: bytes = b"this is not deflate data at all",
    files: Sequence[Tuple[str, bytes, Optional[str]]] = (),
    pages: Iterable[str] = ("Visible",),
) -> bytes:
    """
    Name tree whose first entry is a /FlateDecode stream over bytes that
    do not inflate, followed by ``files``.
    """
    with pikepdf.new() as pdf:
        for text in pages:
            _add_text_page(pdf, text)

        broken = _filespec(pdf, "broken.json", b"", "application/json")
        broken.EF.F.write(raw, filter=Name.FlateDecode)

        names: List = [String("broken.json"), broken]
        for filename, data, mime_type in files:
            names.append(String(filename))
            names.append(_filespec(pdf, filename, data, mime_type))

        pdf.Root["/Names"] = Dictionary(
            EmbeddedFiles=Dictionary(Names=Array(names))
        )
        # Written as-is so the broken stream is not touched on save.
        return _save(pdf, stream_decode_level=pikepdf.StreamDecodeLevel.none)


def cyclic_name_tree_pdf(data: bytes, mime_type: Optional[str] = None) -> bytes:
    """
    Name tree whose root lists the same leaf twice and then itself as
    /Kids.
    """
    with pikepdf.new() as pdf:
        _add_text_page(pdf, "Cyclic")

        leaf = pdf.make_indirect(
            Dictionary(
                Names=Array(
                    [String("loop.json"), _filespec(pdf, "loop.json", data, mime_type)]
                )
            )
        )
        root = pdf.make_indirect(Dictionary())
        root.Kids = Array([leaf, leaf, root])

        pdf.Root["/Names"] = Dictionary(EmbeddedFiles=root)
        return _save(pdf)

from __future__ import annotations

import base64
import io
import os
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from docx import Document
from docx.document import Document as _Document
from docx.enum.section import WD_ORIENT, WD_SECTION
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT, WD_ROW_HEIGHT_RULE, WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_COLOR_INDEX, WD_UNDERLINE
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.part import Part
from docx.oxml import OxmlElement, parse_xml
from docx.oxml.ns import nsdecls, qn
from docx.shared import Emu, Pt, RGBColor, Twips
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph
from docx.text.run import Run as _Run

from node2doc.assembler import build_document
from node2doc.logger import get_logger

LOGGER = get_logger(__name__)

EMU_PER_PIXEL = 9525

SVG_BLIP_EXTENSION_URI = "{96DAC541-7B7A-43D3-8B79-37D633B846F1}"
SVG_MAIN_NAMESPACE = "http://schemas.microsoft.com/office/drawing/2016/SVG/main"
REL_NAMESPACE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

_ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "start": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "end": WD_ALIGN_PARAGRAPH.RIGHT,
    "justified": WD_ALIGN_PARAGRAPH.JUSTIFY,
    "both": WD_ALIGN_PARAGRAPH.JUSTIFY,
}

_TABLE_ALIGNMENTS = {
    "left": WD_TABLE_ALIGNMENT.LEFT,
    "center": WD_TABLE_ALIGNMENT.CENTER,
    "right": WD_TABLE_ALIGNMENT.RIGHT,
}

_VERTICAL_ALIGNMENTS = {
    "top": WD_CELL_VERTICAL_ALIGNMENT.TOP,
    "center": WD_CELL_VERTICAL_ALIGNMENT.CENTER,
    "bottom": WD_CELL_VERTICAL_ALIGNMENT.BOTTOM,
}

_LINE_RULES = {
    "auto": "auto",
    "exact": "exact",
    "exactly": "exact",
    "at_least": "atLeast",
    "atleast": "atLeast",
}

_HEADER_ATTRIBUTES = {
    "default": ("header", "footer"),
    "first": ("first_page_header", "first_page_footer"),
    "even": ("even_page_header", "even_page_footer"),
}

# Schema order of the tcPr children written here; each entry lists what must follow it.
_TCPR_SUCCESSORS = {
    "w:tcBorders": ("w:shd", "w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText", "w:vAlign", "w:hideMark"),
    "w:shd": ("w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText", "w:vAlign", "w:hideMark"),
    "w:tcMar": ("w:textDirection", "w:tcFitText", "w:vAlign", "w:hideMark"),
}

_RPR_SPACING_SUCCESSORS = (
    "w:w", "w:kern", "w:position", "w:sz", "w:szCs", "w:highlight", "w:u", "w:effect", "w:bdr", "w:shd",
    "w:fitText", "w:vertAlign", "w:rtl", "w:cs", "w:em", "w:lang", "w:eastAsianLayout", "w:specVanish", "w:oMath",
)
_RPR_LANG_SUCCESSORS = ("w:eastAsianLayout", "w:specVanish", "w:oMath")

_TBLPR_TBLW_SUCCESSORS = (
    "w:jc", "w:tblCellSpacing", "w:tblInd", "w:tblBorders", "w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook",
)

BlockContainer = Union[_Document, _Cell, Any]


def _rgb_from_hex(s: Optional[str]) -> Optional[RGBColor]:
    if not s:
        return None
    s = s.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6:
        return None
    try:
        return RGBColor.from_string(s.upper())
    except ValueError:
        return None


def _get_enum(enum_cls, name: Optional[str]):
    if not name:
        return None
    # docx option values are camelCase ("darkBlue"); enum members are DARK_BLUE
    key = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", str(name)).upper()
    return enum_cls.__members__.get(key)


def _safe_set_style(obj, style_name: Optional[str]):
    if not style_name:
        return
    try:
        obj.style = style_name
    except KeyError:
        # Unknown style in this document template; ignore.
        LOGGER.debug("Style %r not found in template", style_name)


def _image_bytes(data: Any) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        # base64, optionally as a data: URI
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]
        return base64.b64decode(data)
    raise TypeError(f"Unsupported image data of type {type(data).__name__}")


def _set_on_off(element, tag: str, successors: Iterable[str], attributes: Dict[str, str]) -> None:
    existing = element.find(qn(tag))
    if existing is not None:
        element.remove(existing)
    child = OxmlElement(tag)
    for key, value in attributes.items():
        child.set(qn(key), str(value))
    element.insert_element_before(child, *successors)


def _apply_paragraph_format(p: Paragraph, block: Dict[str, Any]):
    alignment = _ALIGNMENTS.get(block.get("alignment") or "")
    if alignment is not None:
        p.alignment = alignment

    pf = p.paragraph_format
    spacing = block.get("spacing") or {}
    if spacing.get("before") is not None:
        pf.space_before = Twips(int(spacing["before"]))
    if spacing.get("after") is not None:
        pf.space_after = Twips(int(spacing["after"]))
    if spacing.get("line") is not None:
        # written raw: the default "auto" rule reads w:line as 240ths of a line
        spacing_el = p._p.get_or_add_pPr().get_or_add_spacing()
        spacing_el.set(qn("w:line"), str(int(spacing["line"])))
        rule = _LINE_RULES.get(str(spacing.get("line_rule", "auto")).lower(), "auto")
        spacing_el.set(qn("w:lineRule"), rule)

    indent = block.get("indent") or {}
    if indent.get("left") is not None:
        pf.left_indent = Twips(int(indent["left"]))
    if indent.get("right") is not None:
        pf.right_indent = Twips(int(indent["right"]))
    if indent.get("first_line") is not None:
        pf.first_line_indent = Twips(int(indent["first_line"]))
    elif indent.get("hanging") is not None:
        pf.first_line_indent = Twips(-int(indent["hanging"]))

    for key in ("keep_next", "keep_lines", "page_break_before", "widow_control"):
        if block.get(key) is not None:
            setattr(pf, {"keep_next": "keep_with_next", "keep_lines": "keep_together"}.get(key, key), bool(block[key]))


def _underline_from_model(u: Any):
    # Accept True/False/None, enum names like 'DOUBLE', or {"type": ..., "color": ...}
    if u is None or isinstance(u, bool):
        return u
    if isinstance(u, dict):
        u = u.get("type") or "single"
    enum = _get_enum(WD_UNDERLINE, str(u))
    if enum is not None:
        return enum
    return True


def _font_size(value: Any) -> Optional[Pt]:
    # half-points, as in the model
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Pt(value / 2)
    return None


def _apply_run_formatting(run: _Run, run_obj: Dict[str, Any]):
    _safe_set_style(run, run_obj.get("style"))

    if run_obj.get("bold") is not None:
        run.bold = bool(run_obj["bold"])
    if run_obj.get("italics") is not None:
        run.italic = bool(run_obj["italics"])

    if run_obj.get("underline") is not None:
        run.underline = _underline_from_model(run_obj["underline"])
        underline = run_obj["underline"]
        if isinstance(underline, dict) and underline.get("color"):
            u = run._r.get_or_add_rPr().u
            if u is not None:
                u.set(qn("w:color"), underline["color"])

    font = run.font

    name = run_obj.get("font")
    if isinstance(name, dict):
        name = name.get("name") or name.get("ascii")
    if name:
        font.name = name
    if (size := _font_size(run_obj.get("size"))) is not None:
        font.size = size
    if (col := run_obj.get("color")):
        rgb = _rgb_from_hex(col)
        if rgb is not None:
            font.color.rgb = rgb
        elif col == "auto":
            run._r.get_or_add_rPr().get_or_add_color().set(qn("w:val"), "auto")
        else:
            LOGGER.debug("Ignoring non-hex run color %r", col)

    if (hi := run_obj.get("highlight")):
        enum = _get_enum(WD_COLOR_INDEX, hi)
        if enum is not None:
            font.highlight_color = enum

    def set_bool(attr, key):
        val = run_obj.get(key)
        if val is not None:
            setattr(font, attr, bool(val))
    set_bool("all_caps", "all_caps")
    set_bool("small_caps", "small_caps")
    set_bool("strike", "strike")
    set_bool("double_strike", "double_strike")
    set_bool("superscript", "superscript")
    set_bool("subscript", "subscript")

    if run_obj.get("character_spacing") is not None:
        _set_on_off(
            run._r.get_or_add_rPr(),
            "w:spacing",
            _RPR_SPACING_SUCCESSORS,
            {"w:val": int(run_obj["character_spacing"])},
        )


def _apply_alt_text(run: _Run, alt_text: Optional[Dict[str, str]]):
    if not alt_text:
        return
    for doc_pr in run._r.xpath(".//wp:docPr"):
        if alt_text.get("name"):
            doc_pr.set("name", alt_text["name"])
        if alt_text.get("description"):
            doc_pr.set("descr", alt_text["description"])
        if alt_text.get("title"):
            doc_pr.set("title", alt_text["title"])


def _attach_svg(run: _Run, svg: bytes):
    """Add the SVG part and reference it from the fallback picture's blip."""
    part = run.part
    package = part.package
    svg_part = Part(package.next_partname("/word/media/image%d.svg"), "image/svg+xml", svg, package)
    r_id = part.relate_to(svg_part, RT.IMAGE)

    ext_lst = parse_xml(
        f'<a:extLst {nsdecls("a")}>'
        f'<a:ext uri="{SVG_BLIP_EXTENSION_URI}">'
        f'<asvg:svgBlip xmlns:asvg="{SVG_MAIN_NAMESPACE}" xmlns:r="{REL_NAMESPACE}" r:embed="{r_id}"/>'
        "</a:ext></a:extLst>"
    )
    for blip in run._r.xpath(".//a:blip"):
        blip.append(ext_lst)


def _position_xml(axis: str, position: Dict[str, Any]) -> str:
    relative = position.get("relative") or "margin"
    if position.get("align"):
        inner = f'<wp:align>{position["align"]}</wp:align>'
    else:
        inner = f'<wp:posOffset>{int(position.get("offset") or 0)}</wp:posOffset>'
    return f'<wp:position{axis} relativeFrom="{relative}">{inner}</wp:position{axis}>'


def _make_floating(run: _Run, floating: Dict[str, Any]):
    """Replace the picture's ``wp:inline`` with an equivalent ``wp:anchor``."""
    for inline in run._r.xpath(".//wp:inline"):
        extent = inline.find(qn("wp:extent"))
        behind = "1" if floating.get("behind_document") else "0"
        z_index = int(floating.get("z_index") or 0)
        anchor = parse_xml(
            f'<wp:anchor {nsdecls("wp")} distT="0" distB="0" distL="0" distR="0" simplePos="0"'
            f' relativeHeight="{z_index}" behindDoc="{behind}" locked="0" layoutInCell="1"'
            f' allowOverlap="{"0" if floating.get("allow_overlap") is False else "1"}">'
            '<wp:simplePos x="0" y="0"/>'
            f'{_position_xml("H", floating.get("horizontal_position") or {})}'
            f'{_position_xml("V", floating.get("vertical_position") or {})}'
            f'<wp:extent cx="{extent.get("cx")}" cy="{extent.get("cy")}"/>'
            '<wp:effectExtent l="0" t="0" r="0" b="0"/>'
            "<wp:wrapNone/>"
            "</wp:anchor>"
        )
        for child in list(inline):
            if child.tag in (qn("wp:docPr"), qn("wp:cNvGraphicFramePr"), qn("a:graphic")):
                anchor.append(child)
        inline.getparent().replace(inline, anchor)


def _write_image_run(p: Paragraph, run_obj: Dict[str, Any]) -> _Run:
    transformation = run_obj.get("transformation") or {}
    width = Emu(int(transformation.get("width") or 1) * EMU_PER_PIXEL)
    height = Emu(int(transformation.get("height") or 1) * EMU_PER_PIXEL)

    run = p.add_run()
    if run_obj.get("image_type") == "svg":
        fallback = run_obj.get("fallback") or {}
        run.add_picture(io.BytesIO(_image_bytes(fallback.get("data"))), width=width, height=height)
        _attach_svg(run, _image_bytes(run_obj.get("data")))
    else:
        run.add_picture(io.BytesIO(_image_bytes(run_obj.get("data"))), width=width, height=height)

    _apply_alt_text(run, run_obj.get("alt_text"))
    if run_obj.get("floating"):
        _make_floating(run, run_obj["floating"])
    return run


def _write_runs(p: Paragraph, runs: List[Dict[str, Any]]):
    for r in runs:
        rtype = r.get("type", "text")
        if rtype == "break":
            run = p.add_run()
            for _ in range(int(r.get("break") or 1)):
                run.add_break()
        elif rtype == "image":
            _write_image_run(p, r)
        else:
            run = p.add_run(r.get("text") or "")
            _apply_run_formatting(run, r)


def _fill_paragraph(p: Paragraph, block: Dict[str, Any]):
    _safe_set_style(p, block.get("style"))
    _apply_paragraph_format(p, block)
    _write_runs(p, block.get("children") or [])


def _set_table_width(table: Table, width: Dict[str, Any]):
    tbl_pr = table._tbl.tblPr
    tbl_w = tbl_pr.find(qn("w:tblW"))
    if tbl_w is None:
        tbl_w = OxmlElement("w:tblW")
        tbl_pr.insert_element_before(tbl_w, *_TBLPR_TBLW_SUCCESSORS)
    _set_width_attributes(tbl_w, width)


def _set_width_attributes(element, width: Dict[str, Any]):
    if width.get("type") == "pct":
        # fiftieths of a percent
        element.set(qn("w:type"), "pct")
        element.set(qn("w:w"), str(int(round(float(width["size"]) * 50))))
    else:
        element.set(qn("w:type"), str(width.get("type") or "dxa"))
        element.set(qn("w:w"), str(int(width["size"])))


def _set_cell_shading(cell: _Cell, shading: Dict[str, Any]):
    _set_on_off(
        cell._tc.get_or_add_tcPr(),
        "w:shd",
        _TCPR_SUCCESSORS["w:shd"],
        {
            "w:val": shading.get("type") or "clear",
            "w:color": shading.get("color") or "auto",
            "w:fill": shading.get("fill") or "auto",
        },
    )


def _set_cell_margins(cell: _Cell, margins: Dict[str, Any]):
    tc_pr = cell._tc.get_or_add_tcPr()
    existing = tc_pr.find(qn("w:tcMar"))
    if existing is not None:
        tc_pr.remove(existing)
    tc_mar = OxmlElement("w:tcMar")
    for side in ("top", "left", "bottom", "right"):
        if margins.get(side) is None:
            continue
        el = OxmlElement(f"w:{side}")
        el.set(qn("w:w"), str(int(margins[side])))
        el.set(qn("w:type"), "dxa")
        tc_mar.append(el)
    tc_pr.insert_element_before(tc_mar, *_TCPR_SUCCESSORS["w:tcMar"])


def _set_cell_borders(cell: _Cell, borders: Dict[str, Any]):
    tc_pr = cell._tc.get_or_add_tcPr()
    existing = tc_pr.find(qn("w:tcBorders"))
    if existing is not None:
        tc_pr.remove(existing)
    tc_borders = OxmlElement("w:tcBorders")
    for side in ("top", "left", "bottom", "right"):
        border = borders.get(side)
        if not border:
            continue
        el = OxmlElement(f"w:{side}")
        el.set(qn("w:val"), str(border.get("style") or "none"))
        el.set(qn("w:sz"), str(int(border.get("size") or 0)))
        el.set(qn("w:space"), "0")
        el.set(qn("w:color"), str(border.get("color") or "auto").lstrip("#"))
        tc_borders.append(el)
    tc_pr.insert_element_before(tc_borders, *_TCPR_SUCCESSORS["w:tcBorders"])


def _apply_cell_properties(cell: _Cell, cell_obj: Dict[str, Any]):
    v_align = _VERTICAL_ALIGNMENTS.get(cell_obj.get("vertical_align") or "")
    if v_align is not None:
        cell.vertical_alignment = v_align

    width = cell_obj.get("width")
    if width:
        _set_width_attributes(cell._tc.get_or_add_tcPr().get_or_add_tcW(), width)
    if cell_obj.get("borders"):
        _set_cell_borders(cell, cell_obj["borders"])
    if cell_obj.get("shading"):
        _set_cell_shading(cell, cell_obj["shading"])
    if cell_obj.get("margins"):
        _set_cell_margins(cell, cell_obj["margins"])


def _apply_row_properties(row, row_obj: Dict[str, Any]):
    height = row_obj.get("height")
    if isinstance(height, dict) and height.get("value") is not None:
        row.height = Twips(int(height["value"]))
        rule = _get_enum(WD_ROW_HEIGHT_RULE, height.get("rule"))
        if rule is not None:
            row.height_rule = rule
    if row_obj.get("table_header"):
        tr_pr = row._tr.get_or_add_trPr()
        header = OxmlElement("w:tblHeader")
        header.set(qn("w:val"), "true")
        tr_pr.append(header)
    if row_obj.get("cant_split"):
        tr_pr = row._tr.get_or_add_trPr()
        cant_split = OxmlElement("w:cantSplit")
        cant_split.set(qn("w:val"), "true")
        tr_pr.insert(0, cant_split)


def _layout_cells(rows: List[Dict[str, Any]]) -> Tuple[List[Tuple[int, int, int, int, Dict[str, Any]]], int]:
    """Place cells on the grid, skipping slots covered by earlier row spans."""
    occupied = set()
    placements = []
    n_cols = 0
    for r, row in enumerate(rows):
        c = 0
        for cell_obj in row.get("cells") or []:
            while (r, c) in occupied:
                c += 1
            col_span = max(1, int(cell_obj.get("column_span") or 1))
            row_span = min(max(1, int(cell_obj.get("row_span") or 1)), len(rows) - r)
            for rr in range(r, r + row_span):
                for cc in range(c, c + col_span):
                    occupied.add((rr, cc))
            placements.append((r, c, row_span, col_span, cell_obj))
            c += col_span
            n_cols = max(n_cols, c)
    if occupied:
        n_cols = max(n_cols, max(cc for _, cc in occupied) + 1)
    return placements, n_cols


def _add_table(container: BlockContainer, n_rows: int, n_cols: int, width: Dict[str, Any]) -> Table:
    if isinstance(container, (_Document, _Cell)):
        return container.add_table(rows=n_rows, cols=n_cols)
    # headers and footers need an explicit width
    size = Twips(int(width["size"])) if width.get("type") == "dxa" else Twips(9000)
    return container.add_table(n_rows, n_cols, size)


def _write_table(container: BlockContainer, block: Dict[str, Any]):
    rows = block.get("rows") or []
    placements, n_cols = _layout_cells(rows)
    n_rows = len(rows)
    if n_rows == 0 or n_cols == 0:
        return

    width = block.get("width") or {"size": 100, "type": "pct"}
    tbl = _add_table(container, n_rows, n_cols, width)
    _safe_set_style(tbl, block.get("style") or "Table Grid")
    _set_table_width(tbl, width)

    alignment = _TABLE_ALIGNMENTS.get(block.get("alignment") or "")
    if alignment is not None:
        tbl.alignment = alignment

    for i, row_obj in enumerate(rows):
        _apply_row_properties(tbl.rows[i], row_obj)

    for r, c, row_span, col_span, cell_obj in placements:
        cell = tbl.cell(r, c)
        if row_span > 1 or col_span > 1:
            cell = cell.merge(tbl.cell(r + row_span - 1, c + col_span - 1))
        _apply_cell_properties(cell, cell_obj)
        _write_blocks(cell, cell_obj.get("children") or [])


def _write_blocks(container: BlockContainer, blocks: List[Dict[str, Any]]):
    """
    Write paragraph and table blocks into a document body, header, footer or
    table cell.

    Headers, footers and cells start with one empty paragraph; it is reused
    for the first block when that block is a paragraph, and otherwise moved
    after the content.
    """
    placeholder = None
    if not isinstance(container, _Document) and blocks:
        paragraphs = container.paragraphs
        if len(paragraphs) == 1 and not paragraphs[0].text and not paragraphs[0].runs:
            placeholder = paragraphs[0]
            if blocks[0].get("type") == "paragraph":
                _fill_paragraph(placeholder, blocks[0])
                blocks, placeholder = blocks[1:], None

    for block in blocks:
        btype = block.get("type")
        if btype == "paragraph":
            _fill_paragraph(container.add_paragraph(), block)
        elif btype == "table":
            _write_table(container, block)
        else:
            # Unknown block type: ignore
            LOGGER.debug("Ignoring block of type %r", btype)

    if placeholder is not None:
        element = placeholder._p
        parent = element.getparent()
        parent.remove(element)
        # a cell, header or footer must end with a paragraph
        if len(parent) == 0 or parent[-1].tag != qn("w:p"):
            parent.append(element)


def _apply_core_properties(doc: Document, model: Dict[str, Any]):
    cp = doc.core_properties
    def set_if_present(attr, key):
        val = model.get(key)
        if val is not None:
            setattr(cp, attr, val)
    set_if_present("title", "title")
    set_if_present("subject", "subject")
    set_if_present("keywords", "keywords")
    set_if_present("comments", "description")
    set_if_present("author", "creator")
    set_if_present("last_modified_by", "last_modified_by")


def _doc_defaults_rpr(doc: Document):
    styles_el = doc.styles.element
    doc_defaults = styles_el.find(qn("w:docDefaults"))
    if doc_defaults is None:
        doc_defaults = OxmlElement("w:docDefaults")
        styles_el.insert(0, doc_defaults)
    rpr_default = doc_defaults.find(qn("w:rPrDefault"))
    if rpr_default is None:
        rpr_default = OxmlElement("w:rPrDefault")
        doc_defaults.insert(0, rpr_default)
    rpr = rpr_default.find(qn("w:rPr"))
    if rpr is None:
        rpr = OxmlElement("w:rPr")
        rpr_default.append(rpr)
    return rpr


def _apply_document_styles(doc: Document, styles: Optional[Dict[str, Any]]):
    if not styles:
        return
    default_run = ((styles.get("default") or {}).get("document") or {}).get("run") or {}
    if not default_run:
        return

    rpr = _doc_defaults_rpr(doc)
    font = default_run.get("font")
    if isinstance(font, dict):
        font = font.get("name") or font.get("ascii")
    if font:
        r_fonts = rpr.get_or_add_rFonts()
        for theme_attr in ("w:asciiTheme", "w:hAnsiTheme", "w:eastAsiaTheme", "w:cstheme"):
            r_fonts.attrib.pop(qn(theme_attr), None)
        for attr in ("w:ascii", "w:hAnsi", "w:eastAsia", "w:cs"):
            r_fonts.set(qn(attr), font)
    if (size := _font_size(default_run.get("size"))) is not None:
        rpr.get_or_add_sz().val = size
    color = _rgb_from_hex(default_run.get("color"))
    if color is not None:
        rpr.get_or_add_color().val = color
    language = default_run.get("language")
    if isinstance(language, dict):
        language = language.get("value")
    if language:
        _set_on_off(rpr, "w:lang", _RPR_LANG_SUCCESSORS, {"w:val": language})


def _apply_section_settings(section, properties: Dict[str, Any]):
    page = properties.get("page") or {}

    size = page.get("size") or {}
    width, height = size.get("width"), size.get("height")
    landscape = size.get("orientation") == "landscape"
    if landscape:
        width, height = height, width
        section.orientation = WD_ORIENT.LANDSCAPE
    elif size.get("orientation") == "portrait":
        section.orientation = WD_ORIENT.PORTRAIT
    if isinstance(width, (int, float)):
        section.page_width = Twips(int(width))
    if isinstance(height, (int, float)):
        section.page_height = Twips(int(height))
    if size.get("code") is not None:
        section._sectPr.get_or_add_pgSz().set(qn("w:code"), str(size["code"]))

    margin = page.get("margin") or {}
    def set_len(attr, key):
        v = margin.get(key)
        if isinstance(v, (int, float)):
            setattr(section, attr, Twips(int(v)))
    set_len("top_margin", "top")
    set_len("bottom_margin", "bottom")
    set_len("left_margin", "left")
    set_len("right_margin", "right")
    set_len("header_distance", "header")
    set_len("footer_distance", "footer")
    set_len("gutter", "gutter")

    if properties.get("title_page") is not None:
        section.different_first_page_header_footer = bool(properties["title_page"])


def _write_headers_footers(section, section_obj: Dict[str, Any]):
    for kind, index in (("headers", 0), ("footers", 1)):
        for slot, content in (section_obj.get(kind) or {}).items():
            attributes = _HEADER_ATTRIBUTES.get(slot)
            if attributes is None:
                LOGGER.debug("Ignoring %s slot %r", kind, slot)
                continue
            part = getattr(section, attributes[index])
            part.is_linked_to_previous = False
            _write_blocks(part, content.get("children") or [])


def build_docx(model: Dict[str, Any]) -> Document:
    """Create a python-docx Document from a compiled document model."""
    doc = Document()

    _apply_core_properties(doc, model)
    _apply_document_styles(doc, model.get("styles"))
    if model.get("even_and_odd_header_and_footers") is not None:
        doc.settings.odd_and_even_pages_header_footer = bool(model["even_and_odd_header_and_footers"])

    section_objs = model.get("sections") or []
    for index, section_obj in enumerate(section_objs):
        if index > 0:
            doc.add_section(WD_SECTION.NEW_PAGE)
        _write_blocks(doc, section_obj.get("children") or [])

    # a section break clones the sentinel sectPr without its header references,
    # so page settings and headers are applied once every break exists
    for section, section_obj in zip(doc.sections, section_objs):
        _apply_section_settings(section, section_obj.get("properties") or {})
        _write_headers_footers(section, section_obj)

    return doc


def document_to_bytes(model: Dict[str, Any]) -> bytes:
    stream = io.BytesIO()
    build_docx(model).save(stream)
    return stream.getvalue()


def write_document(model: Dict[str, Any], output_docx_path: str) -> Document:
    """
    Build a .docx file from a compiled document model.

    Args:
        model: Document model produced by ``build_document``.
        output_docx_path: where to save the resulting .docx.

    Returns:
        The python-docx Document object (already saved to output_docx_path).
    """
    doc = build_docx(model)
    os.makedirs(os.path.dirname(os.path.abspath(output_docx_path)), exist_ok=True)
    doc.save(output_docx_path)
    LOGGER.info("Wrote %s", output_docx_path)
    return doc


def render_to_bytes(tree) -> bytes:
    """Compile a node tree and serialize it to .docx bytes."""
    return document_to_bytes(build_document(tree))


def render_to_file(tree, output_docx_path: str) -> Document:
    return write_document(build_document(tree), output_docx_path)

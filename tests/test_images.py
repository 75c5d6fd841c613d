"""
Tests for image and SVG paragraphs.
"""

from node2doc.constants import TRANSPARENT_PNG_FALLBACK
from node2doc.elements import Image, Path, Svg, Text
from node2doc.images import (
    create_image_paragraph,
    create_svg_image_paragraph,
    normalize_image_type,
    render_svg_to_string,
)


class TestImageParagraph:

    def test_basic_image(self):
        paragraph = create_image_paragraph(
            Image(src=b"png", style={"width": "96px", "height": 48, "text_align": "right"})
        )
        assert paragraph["type"] == "paragraph"
        assert paragraph["alignment"] == "right"
        run = paragraph["children"][0]
        assert run == {
            "type": "image",
            "image_type": "png",
            "data": b"png",
            "transformation": {"width": 96, "height": 64},
        }

    def test_image_types(self):
        assert normalize_image_type("jpeg") == "jpg"
        assert normalize_image_type(None) == "png"
        assert normalize_image_type("gif") == "gif"

    def test_svg_source_gets_fallback(self):
        run = create_image_paragraph(Image(src=b"<svg/>", type="svg"))["children"][0]
        assert run["fallback"] == {"type": "png", "data": TRANSPARENT_PNG_FALLBACK}

    def test_svg_fallback_is_raster(self):
        run = create_image_paragraph(Image(src=b"<svg/>", type="svg", fallback={"type": "svg", "data": b"x"}))[
            "children"
        ][0]
        assert run["fallback"] == {"type": "png", "data": b"x"}

    def test_transformation_and_alt_text_props(self):
        run = create_image_paragraph(
            Image(
                src=b"png",
                style={"width": 10},
                transformation={"width": 5, "height": 6},
                alt_text={"name": "logo", "description": "Company logo", "title": "Logo"},
            )
        )["children"][0]
        assert run["transformation"] == {"width": 5, "height": 6}
        assert run["alt_text"]["description"] == "Company logo"

    def test_absolute_image_floats(self):
        run = create_image_paragraph(
            Image(src=b"png", style={"position": "absolute", "left": "10pt", "top": "20pt"})
        )["children"][0]
        assert run["floating"]["horizontal_position"] == {"relative": "margin", "offset": 127000}
        assert run["floating"]["vertical_position"] == {"relative": "margin", "offset": 254000}

    def test_floating_prop_wins(self):
        floating = {"horizontal_position": {"relative": "page", "offset": 0}}
        run = create_image_paragraph(Image(src=b"png", floating=floating, style={"position": "absolute"}))[
            "children"
        ][0]
        assert run["floating"] == floating

    def test_model_does_not_alias_props(self):
        floating = {"horizontal_position": {"relative": "page", "offset": 0}}
        transformation = {"width": 5, "height": 6}
        node = Image(src=b"png", floating=floating, transformation=transformation)
        run = create_image_paragraph(node)["children"][0]
        run["floating"]["horizontal_position"]["offset"] = 999
        run["transformation"]["width"] = 50
        assert node.props["floating"]["horizontal_position"]["offset"] == 0
        assert node.props["transformation"] == {"width": 5, "height": 6}

    def test_inherited_style_applies(self):
        paragraph = create_image_paragraph(Image(src=b"png"), {"text_align": "center"})
        assert paragraph["alignment"] == "center"


class TestSvg:

    def test_markup(self):
        node = Svg(
            Path(d="M0 0L10 10", fill="red"),
            Text("ignored"),
            width=10,
            height=20,
            view_box="0 0 10 10",
        )
        assert render_svg_to_string(node) == (
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="20" viewBox="0 0 10 10">'
            '<path d="M0 0L10 10" fill="red" /></svg>'
        )

    def test_path_stroke(self):
        markup = render_svg_to_string(Svg(Path(d="M1 1", stroke="#000", stroke_width=2)))
        assert '<path d="M1 1" stroke="#000" stroke-width="2" />' in markup

    def test_svg_paragraph(self):
        paragraph = create_svg_image_paragraph(Svg(Path(d="M0 0"), width=10, height=20))
        run = paragraph["children"][0]
        assert run["image_type"] == "svg"
        assert run["data"].startswith(b"<?xml")
        assert run["transformation"] == {"width": 13, "height": 27}
        assert run["fallback"] == {"type": "png", "data": TRANSPARENT_PNG_FALLBACK}

    def test_style_size_beats_props(self):
        run = create_svg_image_paragraph(Svg(width=10, height=20, style={"width": 72, "height": 72}))["children"][0]
        assert run["transformation"] == {"width": 96, "height": 96}

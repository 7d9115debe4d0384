import pytest

from sassinline.inline.datauri import css_data_url, media_type_for, parse_css_data_url


class TestMediaType:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("icon.png", "image/png"),
            ("logo.SVG", "image/svg+xml"),
            ("font.woff2", "font/woff2"),
            ("legacy.eot", "application/vnd.ms-fontobject"),
            ("blob.unknownext", "application/octet-stream"),
        ],
    )
    def test_media_type_for(self, name, expected):
        assert media_type_for(name) == expected


class TestDataUrl:
    def test_css_data_url(self):
        assert css_data_url(b"hi", "text/plain") == "url(data:text/plain;base64,aGk=)"

    def test_parse_wrapped_and_bare(self):
        assert parse_css_data_url("url(data:text/plain;base64,aGk=)") == (b"hi", "text/plain")
        assert parse_css_data_url("data:text/plain;base64,aGk=") == (b"hi", "text/plain")

    def test_parse_quoted_with_parameters(self):
        value = "url('data:image/svg+xml;charset=utf-8;base64,PHN2Zy8+')"
        assert parse_css_data_url(value) == (b"<svg/>", "image/svg+xml")

    def test_rejects_plain_reference(self):
        with pytest.raises(ValueError):
            parse_css_data_url("url(icon.png)")

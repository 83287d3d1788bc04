"""Byte-exact checks for the ESC/POS command builders."""

import pytest

from printpos.escpos.commands.barcode import (
    BarcodeHRI,
    BarcodeType,
    lookup_barcode_type,
    print_barcode,
    set_barcode_height,
    set_barcode_width,
    set_hri_position,
)
from printpos.escpos.commands.charset import (
    CodePage,
    InternationalCharset,
    set_code_page,
    set_international_charset,
)
from printpos.escpos.commands.hardware import (
    DC2_TEST_PAGE,
    ESC_INIT_PRINTER,
    cut,
    pulse,
    set_heat_config,
    set_print_density,
    sleep_after,
)
from printpos.escpos.commands.line_spacing import feed_lines, feed_rows, set_line_height
from printpos.escpos.commands.positioning import (
    Justification,
    move_x,
    move_y,
    set_justification,
    set_tab_stops,
)
from printpos.escpos.commands.sizing import Font, FontSize, select_font, set_char_size
from printpos.escpos.commands.text_formatting import (
    set_bold,
    set_char_spacing,
    set_emphasize,
    set_reverse,
    set_rotate,
    set_smooth,
    set_underline,
    set_upsidedown,
)

# =============================================================================
# HARDWARE
# =============================================================================


class TestHardware:
    def test_constants(self) -> None:
        assert ESC_INIT_PRINTER == b"\x1b\x40"
        assert DC2_TEST_PAGE == b"\x12\x54"

    def test_sleep_after_extended_firmware(self) -> None:
        assert sleep_after(0, 268) == b"\x1b\x38\x00\x00"
        assert sleep_after(300, 264) == b"\x1b\x38\x2c\x01"

    def test_sleep_after_legacy_firmware(self) -> None:
        assert sleep_after(5, 260) == b"\x1b\x38\x05"

    def test_sleep_after_range(self) -> None:
        with pytest.raises(ValueError):
            sleep_after(-1, 268)

    def test_heat_config(self) -> None:
        assert set_heat_config(11, 120, 40) == b"\x1b\x37\x0b\x78\x28"
        with pytest.raises(ValueError):
            set_heat_config(11, 256, 40)

    def test_default_density_byte(self) -> None:
        assert set_print_density(10, 2) == b"\x12\x23\x4a"

    @pytest.mark.parametrize("density,break_time", [(32, 0), (0, 8), (-1, 0)])
    def test_density_range(self, density: int, break_time: int) -> None:
        with pytest.raises(ValueError):
            set_print_density(density, break_time)

    def test_cut(self) -> None:
        assert cut() == b"\x1d\x56\x41\x00"
        assert cut(partial=True) == b"\x1d\x56\x42\x00"

    def test_pulse(self) -> None:
        assert pulse() == b"\x1b\x70\x00\x19\x19"
        assert pulse(1, 50, 100) == b"\x1b\x70\x01\x32\x64"


# =============================================================================
# TEXT FORMATTING AND SIZING
# =============================================================================


class TestTextFormatting:
    def test_bold_pairs_spacing_and_emphasis(self) -> None:
        assert set_bold(True) == b"\x1b\x20\x01\x1b\x45\x01"
        assert set_bold(False) == b"\x1b\x20\x00\x1b\x45\x00"

    @pytest.mark.parametrize("level", [0, 1, 2])
    def test_underline_levels(self, level: int) -> None:
        assert set_underline(level) == bytes([0x1B, 0x2D, level])

    def test_underline_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            set_underline(3)

    def test_toggles(self) -> None:
        assert set_emphasize(1) == b"\x1bG\x01"
        assert set_upsidedown(1) == b"\x1b{\x01"
        assert set_rotate(0) == b"\x1bV\x00"
        assert set_reverse(5) == b"\x1dB\x01"
        assert set_smooth(1) == b"\x1db\x01"

    def test_char_spacing(self) -> None:
        assert set_char_spacing(4) == b"\x1b\x20\x04"


class TestSizing:
    @pytest.mark.parametrize(
        "size,code",
        [(FontSize.NORMAL, 0x00), (FontSize.MEDIUM, 0x01), (FontSize.LARGE, 0x11)],
    )
    def test_named_size_codes(self, size: FontSize, code: int) -> None:
        assert size.code == code
        assert set_char_size(size.width, size.height) == bytes([0x1D, 0x21, code])

    def test_max_scale(self) -> None:
        assert set_char_size(8, 8) == b"\x1d\x21\x77"

    @pytest.mark.parametrize("width,height", [(0, 1), (1, 9), (9, 9)])
    def test_scale_out_of_range(self, width: int, height: int) -> None:
        with pytest.raises(ValueError):
            set_char_size(width, height)

    def test_select_font(self) -> None:
        assert select_font(Font.A) == b"\x1bM\x00"
        assert select_font(Font.B) == b"\x1bM\x01"


# =============================================================================
# POSITIONING AND LINE SPACING
# =============================================================================


class TestPositioning:
    def test_justification(self) -> None:
        assert set_justification(Justification.LEFT) == b"\x1ba\x00"
        assert set_justification(Justification.CENTER) == b"\x1ba\x01"
        assert set_justification(Justification.RIGHT) == b"\x1ba\x02"

    def test_default_tab_stops(self) -> None:
        assert set_tab_stops() == b"\x1b\x44\x04\x08\x0c\x10\x14\x18\x1c\x00"

    def test_tab_stops_must_ascend(self) -> None:
        with pytest.raises(ValueError):
            set_tab_stops([8, 4])

    def test_moves_little_endian(self) -> None:
        assert move_x(300) == b"\x1b\x24\x2c\x01"
        assert move_y(10) == b"\x1d\x24\x0a\x00"
        with pytest.raises(ValueError):
            move_x(70000)


class TestLineSpacing:
    def test_feed_lines(self) -> None:
        assert feed_lines(3) == b"\x1bd\x03"
        with pytest.raises(ValueError):
            feed_lines(256)

    def test_feed_rows(self) -> None:
        assert feed_rows(24) == b"\x1bJ\x18"

    def test_line_height(self) -> None:
        assert set_line_height(30) == b"\x1b3\x1e"


# =============================================================================
# BARCODE AND CHARSET
# =============================================================================


class TestBarcode:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("UPC-A", BarcodeType.UPC_A),
            ("upce", BarcodeType.UPC_E),
            ("EAN13", BarcodeType.EAN13),
            ("ean_8", BarcodeType.EAN8),
            ("CODE39", BarcodeType.CODE39),
            ("ITF", BarcodeType.ITF),
            ("codabar", BarcodeType.CODABAR),
            ("CODE93", BarcodeType.CODE93),
            ("Code 128", BarcodeType.CODE128),
            ("CODE11", BarcodeType.CODE11),
        ],
    )
    def test_ten_symbologies(self, name: str, expected: BarcodeType) -> None:
        assert lookup_barcode_type(name) is expected

    def test_unknown_symbology(self) -> None:
        assert lookup_barcode_type("PDF417") is None

    def test_format_b(self) -> None:
        assert print_barcode(BarcodeType.CODE128, b"123", 268) == b"\x1dk\x49\x03123"

    def test_format_a(self) -> None:
        assert print_barcode(BarcodeType.EAN8, b"1234567", 260) == b"\x1dk\x031234567\x00"

    def test_payload_limits(self) -> None:
        with pytest.raises(ValueError):
            print_barcode(BarcodeType.CODE128, b"", 268)
        with pytest.raises(ValueError):
            print_barcode(BarcodeType.CODE128, b"1" * 256, 268)

    def test_settings(self) -> None:
        assert set_hri_position(BarcodeHRI.BELOW) == b"\x1dH\x02"
        assert set_barcode_width() == b"\x1dw\x03"
        assert set_barcode_height(50) == b"\x1dh\x32"
        with pytest.raises(ValueError):
            set_barcode_height(0)


class TestCharset:
    @pytest.mark.parametrize(
        "page,index",
        [
            (CodePage.PC437, 0),
            (CodePage.PC850, 2),
            (CodePage.WPC1252, 16),
            (CodePage.PC866, 17),
            (CodePage.PC858, 19),
            (CodePage.WPC1251, 46),
        ],
    )
    def test_code_page_index(self, page: CodePage, index: int) -> None:
        assert set_code_page(page) == bytes([0x1B, 0x74, index])

    def test_international_charset(self) -> None:
        assert set_international_charset(InternationalCharset.de) == b"\x1bR\x02"
        assert set_international_charset(InternationalCharset.no) == b"\x1bR\x09"

"""Tests for PopplerRasterizer class."""

from unittest.mock import MagicMock

import pytest
import sh

from previewgen.exceptions import RasterizeError
from previewgen.rasterizer import PopplerRasterizer


def fake_pdftoppm(page_count):
    """Build a pdftoppm stand-in that writes page-N.jpg files."""
    def run(*args):
        prefix = args[-1]
        for number in range(1, page_count + 1):
            with open(f"{prefix}-{number}.jpg", 'wb') as f:
                f.write(f"page {number}".encode())
    return MagicMock(side_effect=run)


class TestPopplerRasterizer:
    """Tests for PopplerRasterizer class."""

    @pytest.fixture
    def document(self, tmp_path):
        """A staged PDF document."""
        path = tmp_path / 'docs' / 'abc123.pdf'
        path.parent.mkdir()
        path.write_bytes(b'%PDF-1.4 fake')
        return path

    @pytest.fixture
    def output_dir(self, tmp_path):
        return tmp_path / 'previews' / 'abc123'

    def test_rasterize_pdf(self, mocker, document, output_dir):
        """Pages come back 0-based, in page order."""
        rasterizer = PopplerRasterizer()
        pdftoppm = fake_pdftoppm(3)
        mocker.patch.object(rasterizer, '_command', return_value=pdftoppm)

        pages = rasterizer.rasterize(document, 1000, output_dir)

        assert [p.index for p in pages] == [0, 1, 2]
        assert [p.path.name for p in pages] == ['0.jpg', '1.jpg', '2.jpg']
        assert pages[2].path.read_bytes() == b'page 3'
        rasterizer._command.assert_called_once_with('pdftoppm')
        args = pdftoppm.call_args[0]
        assert args[:5] == ('-jpeg', '-scale-to-x', '1000', '-scale-to-y', '-1')
        assert args[5] == str(document)

    def test_rasterize_orders_numerically(self, mocker, document, output_dir):
        """page-10 sorts after page-9."""
        rasterizer = PopplerRasterizer()
        mocker.patch.object(rasterizer, '_command', return_value=fake_pdftoppm(11))

        pages = rasterizer.rasterize(document, 1000, output_dir)

        assert len(pages) == 11
        assert pages[9].path.read_bytes() == b'page 10'
        assert pages[10].path.read_bytes() == b'page 11'

    def test_rasterize_no_pages(self, mocker, document, output_dir):
        """A document without extractable pages yields an empty list."""
        rasterizer = PopplerRasterizer()
        mocker.patch.object(rasterizer, '_command', return_value=MagicMock())

        assert rasterizer.rasterize(document, 1000, output_dir) == []

    def test_rasterize_office_document(self, mocker, tmp_path, output_dir):
        """Non-PDF documents are converted with LibreOffice first."""
        document = tmp_path / 'abc123.docx'
        document.write_bytes(b'fake docx')

        def soffice_run(*args):
            outdir = args[args.index('--outdir') + 1]
            with open(f"{outdir}/abc123.pdf", 'wb') as f:
                f.write(b'%PDF')

        soffice = MagicMock(side_effect=soffice_run)
        pdftoppm = fake_pdftoppm(2)
        rasterizer = PopplerRasterizer()
        mocker.patch.object(
            rasterizer, '_command',
            side_effect=lambda binary: soffice if binary == 'soffice' else pdftoppm,
        )

        pages = rasterizer.rasterize(document, 1000, output_dir)

        assert len(pages) == 2
        assert soffice.call_args[0][:3] == ('--headless', '--convert-to', 'pdf')
        assert pdftoppm.call_args[0][5] == str(output_dir / 'abc123.pdf')

    def test_office_conversion_without_output(self, mocker, tmp_path, output_dir):
        """No PDF from LibreOffice means no pages."""
        document = tmp_path / 'abc123.ppt'
        document.write_bytes(b'fake ppt')
        rasterizer = PopplerRasterizer()
        mocker.patch.object(rasterizer, '_command', return_value=MagicMock())

        assert rasterizer.rasterize(document, 1000, output_dir) == []
        rasterizer._command.assert_called_once_with('soffice')

    def test_nonzero_exit_raises(self, mocker, document, output_dir):
        """A failing converter surfaces as RasterizeError."""
        rasterizer = PopplerRasterizer()
        failing = MagicMock(side_effect=sh.ErrorReturnCode_1('pdftoppm', b'', b'Syntax Error'))
        mocker.patch.object(rasterizer, '_command', return_value=failing)

        with pytest.raises(RasterizeError) as exc_info:
            rasterizer.rasterize(document, 1000, output_dir)

        assert 'Syntax Error' in str(exc_info.value)

    def test_missing_binary_raises(self, mocker, document, output_dir):
        """A missing converter surfaces as RasterizeError."""
        rasterizer = PopplerRasterizer(pdftoppm_bin='/nonexistent/pdftoppm')
        mocker.patch.object(rasterizer, '_command', side_effect=sh.CommandNotFound('/nonexistent/pdftoppm'))

        with pytest.raises(RasterizeError):
            rasterizer.rasterize(document, 1000, output_dir)

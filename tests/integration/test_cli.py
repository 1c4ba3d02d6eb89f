"""
Tests for the command line interface.

Tests cover:
- Text and JSON output for valid input
- Error output and exit codes
- Options for symbology, check digits, HRI titles and validations
"""

import json

import pytest

from gs1_syntax.__main__ import main


class TestCLI:
    """Tests for gs1_syntax.__main__.main."""

    def test_text_output(self, capsys):
        assert main(["(01)09501101530003(10)ABC123"]) == 0
        out = capsys.readouterr().out
        assert "Bracketed:    (01)09501101530003(10)ABC123" in out
        assert "Unbracketed:  ^010950110153000310ABC123" in out
        assert "Digital Link: https://id.gs1.org/01/09501101530003/10/ABC123" in out
        assert "(10) ABC123" in out
        assert "AI(10): BATCH/LOT" in out

    def test_error_output(self, capsys):
        assert main(["(01)09501101530004"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ERROR [LINTER_FAILURE]" in captured.err
        assert "(01)0950110153000|4|" in captured.err

    def test_cross_field_error_lists_ais(self, capsys):
        assert main(["(10)ABC"]) == 1
        assert "AIs: 10" in capsys.readouterr().err

    def test_json_output(self, capsys):
        assert main(["--json", "(01)09501101530003(17)261231"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["valid"] is True
        assert data["elements"][1]["date"] == "2026-12-31"

    def test_json_error(self, capsys):
        assert main(["--json", "(10)ABC"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["valid"] is False
        assert data["error"]["kind"] == "MISSING_REQUISITE"

    def test_no_requisite_check(self, capsys):
        assert main(["--no-requisite-check", "(10)ABC"]) == 0

    def test_symbology(self, capsys):
        assert main(["--symbology", "datamatrix", "(01)09501101530003"]) == 0
        assert "]d20109501101530003" in capsys.readouterr().out

    def test_scan_data_unavailable(self, capsys):
        assert main(["(01)09501101530003"]) == 0
        assert "(unavailable: no symbology)" in capsys.readouterr().out

    def test_add_check_digit(self, capsys):
        assert main(["--symbology", "ean-13", "--add-check-digit", "211234567890"]) == 0
        assert "(01) 02112345678900" in capsys.readouterr().out

    def test_hri_titles(self, capsys):
        assert main(["--hri-titles", "(01)09501101530003"]) == 0
        assert "GTIN (01) 09501101530003" in capsys.readouterr().out

    def test_dl_domain(self, capsys):
        assert main(["--dl-domain", "https://example.com", "(01)09501101530003"]) == 0
        assert "https://example.com/01/09501101530003" in capsys.readouterr().out

    def test_unknown_ais(self, capsys):
        assert main(["(3249)123456"]) == 1
        capsys.readouterr()
        assert main(["--permit-unknown-ais", "(3249)123456"]) == 0
        assert "AI(3249): UNKNOWN" in capsys.readouterr().out

    def test_ignored_query_params(self, capsys):
        assert main(["https://id.gs1.org/01/09501101530003?foo=bar"]) == 0
        out = capsys.readouterr().out
        assert "Ignored query parameters:" in out
        assert "foo=bar" in out

    def test_invalid_symbology(self):
        with pytest.raises(SystemExit):
            main(["--symbology", "pdf417", "(01)09501101530003"])

"""Tests for painel.domain.importer pure functions."""

import logging
from datetime import datetime

import pytest

from painel.domain.importer import (
    CSV_DESCRIPTION,
    CSV_PAYMENT_METHOD,
    CsvImportError,
    CsvRow,
    InvalidHeaderError,
    NoValidRowsError,
    parse_br_amount,
    parse_br_date,
    parse_csv,
    parse_header,
)
from painel.domain.models import TransactionType

HEADER = "data_lançamento;Categoria;Valor em R$;descrição"


def csv_text(*rows: str, header: str = HEADER) -> str:
    return "\n".join([header, *rows]) + "\n"


class TestParseBrAmount:
    """Tests for parse_br_amount."""

    def test_currency_with_thousands(self) -> None:
        """Should parse "R$ 1.234,56"."""
        assert parse_br_amount("R$ 1.234,56") == pytest.approx(1234.56)

    def test_plain_decimal_comma(self) -> None:
        assert parse_br_amount("150,75") == pytest.approx(150.75)

    def test_integer(self) -> None:
        assert parse_br_amount("10") == 10.0

    def test_negative_is_kept(self) -> None:
        """Negative amounts are not rejected."""
        assert parse_br_amount("-25,50") == pytest.approx(-25.5)

    def test_not_a_number(self) -> None:
        assert parse_br_amount("abc") is None

    def test_empty_after_cleanup(self) -> None:
        assert parse_br_amount("R$") is None

    def test_non_finite(self) -> None:
        """NaN and infinity are not valid amounts."""
        assert parse_br_amount("nan") is None
        assert parse_br_amount("inf") is None

    def test_rejects_underscores_and_exponents(self) -> None:
        """Only plain digits with one decimal separator are amounts."""
        assert parse_br_amount("1_000") is None
        assert parse_br_amount("1e3") is None
        assert parse_br_amount("+10") is None

    def test_huge_amount_is_not_finite(self) -> None:
        assert parse_br_amount("9" * 400) is None


class TestParseBrDate:
    """Tests for parse_br_date."""

    def test_valid_date_at_midnight(self) -> None:
        assert parse_br_date("15/03/2024") == datetime(2024, 3, 15, 0, 0)

    def test_wrong_separator(self) -> None:
        assert parse_br_date("2024-03-15") is None

    def test_wrong_part_count(self) -> None:
        assert parse_br_date("15/03") is None
        assert parse_br_date("15/03/2024/1") is None

    def test_impossible_dates(self) -> None:
        """Month 13 and Feb 30 are rejected."""
        assert parse_br_date("01/13/2024") is None
        assert parse_br_date("30/02/2024") is None

    def test_leap_day(self) -> None:
        assert parse_br_date("29/02/2024") == datetime(2024, 2, 29)

    def test_non_numeric_parts(self) -> None:
        assert parse_br_date("aa/bb/cccc") is None

    def test_two_digit_year(self) -> None:
        """A DD/MM/YY date is not read as year 0024."""
        assert parse_br_date("15/03/24") is None
        assert parse_br_date("15/03/20241") is None

    def test_rejects_sign_and_underscore(self) -> None:
        assert parse_br_date("1_5/03/2024") is None
        assert parse_br_date("+15/03/2024") is None
        assert parse_br_date("15/-3/2024") is None

    def test_single_digit_day_and_month(self) -> None:
        assert parse_br_date("5/3/2024") == datetime(2024, 3, 5)


class TestParseHeader:
    """Tests for parse_header."""

    def test_strips_bom_quotes_and_carriage_return(self) -> None:
        """Should clean header names."""
        header = parse_header('\ufeff"data_lançamento"; "Categoria" ;"Valor em R$"\r')

        assert header == ["data_lançamento", "Categoria", "Valor em R$"]

    def test_missing_column_lists_expected_and_found(self) -> None:
        """Should report both required and found columns."""
        with pytest.raises(InvalidHeaderError) as exc_info:
            parse_header("data_lançamento;Categoria;Valor")

        error = exc_info.value
        assert error.missing == ["Valor em R$"]
        assert error.found == ["data_lançamento", "Categoria", "Valor"]
        message = str(error)
        assert "data_lançamento; Categoria; Valor em R$" in message
        assert "data_lançamento; Categoria; Valor" in message

    def test_column_names_are_case_sensitive(self) -> None:
        with pytest.raises(InvalidHeaderError):
            parse_header("data_lançamento;categoria;Valor em R$")


class TestCsvRow:
    """Tests for CsvRow.from_fields."""

    def test_maps_by_name(self) -> None:
        """Columns may be reordered."""
        header = ["Valor em R$", "extra", "Categoria", "data_lançamento"]
        row = CsvRow.from_fields(header, ["10,00", "x", "Dízimo", "01/01/2025"])

        assert row.date == "01/01/2025"
        assert row.category == "Dízimo"
        assert row.value == "10,00"
        assert row.description == ""

    def test_missing_trailing_fields_are_empty(self) -> None:
        row = CsvRow.from_fields(["data_lançamento", "Categoria", "Valor em R$", "descrição"], ["01/01/2025"])

        assert row.category == ""
        assert row.value == ""


class TestParseCsv:
    """Tests for parse_csv."""

    def test_parses_documented_row(self) -> None:
        """Should parse a full row with declared type."""
        result = parse_csv(csv_text("15/03/2024;Doações;150,75;Oferta especial"), TransactionType.REVENUE)

        assert len(result.transactions) == 1
        txn = result.transactions[0]
        assert txn.date == datetime(2024, 3, 15)
        assert txn.value == pytest.approx(150.75)
        assert txn.category == "Doações"
        assert txn.description == "Oferta especial"
        assert txn.type is TransactionType.REVENUE
        assert txn.payment_method == CSV_PAYMENT_METHOD
        assert txn.file_name is None
        assert txn.id is None

    def test_declared_expense_type(self) -> None:
        result = parse_csv(csv_text("01/02/2025;Aluguel;R$ 1.200,00"), TransactionType.EXPENSE)

        assert result.transactions[0].type is TransactionType.EXPENSE
        assert result.transactions[0].value == pytest.approx(1200.0)

    def test_description_fallback(self) -> None:
        """Missing description uses the CSV marker."""
        result = parse_csv(csv_text("01/02/2025;Dízimo;50,00"), TransactionType.REVENUE)

        assert result.transactions[0].description == CSV_DESCRIPTION

    def test_header_without_description_column(self) -> None:
        text = csv_text("01/02/2025;Dízimo;50,00", header="data_lançamento;Categoria;Valor em R$")

        result = parse_csv(text, TransactionType.REVENUE)

        assert result.transactions[0].description == CSV_DESCRIPTION

    def test_skips_malformed_date_without_failing(self) -> None:
        """A bad row is skipped and reported, the rest is imported."""
        text = csv_text("2024-03-15;X;10,00", "15/03/2024;Y;20,00")

        result = parse_csv(text, TransactionType.REVENUE)

        assert [txn.category for txn in result.transactions] == ["Y"]
        assert len(result.skipped) == 1
        assert result.skipped[0].line_number == 2
        assert "invalid date" in result.skipped[0].reason

    def test_skips_two_digit_year(self) -> None:
        result = parse_csv(csv_text("15/03/24;X;10,00", "15/03/2024;Y;20,00"), TransactionType.REVENUE)

        assert [txn.category for txn in result.transactions] == ["Y"]
        assert "invalid date '15/03/24'" in result.skipped[0].reason

    def test_skips_invalid_value(self) -> None:
        result = parse_csv(csv_text("15/03/2024;X;abc", "15/03/2024;Y;1,00"), TransactionType.REVENUE)

        assert [txn.category for txn in result.transactions] == ["Y"]
        assert "invalid value" in result.skipped[0].reason

    def test_skips_rows_with_empty_required_fields(self) -> None:
        text = csv_text("15/03/2024;;10,00", ";X;10,00", "15/03/2024;X;", "15/03/2024;Ok;5")

        result = parse_csv(text, TransactionType.REVENUE)

        assert len(result.transactions) == 1
        assert len(result.skipped) == 3

    def test_logs_skipped_rows(self, caplog: pytest.LogCaptureFixture) -> None:
        """Skipped rows are logged as warnings."""
        with caplog.at_level(logging.WARNING, logger="painel.domain.importer"):
            parse_csv(csv_text("31/02/2024;X;10", "01/03/2024;Y;10"), TransactionType.REVENUE)

        assert any("31/02/2024" in record.getMessage() for record in caplog.records)

    def test_handles_bom_crlf_quotes_and_blank_lines(self) -> None:
        """Windows-style exports parse the same way."""
        text = (
            '\ufeff"data_lançamento";"Categoria";"Valor em R$";"descrição"\r\n'
            "\r\n"
            '"05/01/2025";"Ofertas";"R$ 2.500,10";"Culto"\r\n'
            "   \r\n"
        )

        result = parse_csv(text, TransactionType.REVENUE)

        assert len(result.transactions) == 1
        txn = result.transactions[0]
        assert txn.value == pytest.approx(2500.10)
        assert txn.category == "Ofertas"
        assert txn.description == "Culto"
        assert result.skipped == []

    def test_extra_and_reordered_columns(self) -> None:
        text = csv_text("x;10,00;Dízimo;20/01/2025", header="conta;Valor em R$;Categoria;data_lançamento")

        result = parse_csv(text, TransactionType.REVENUE)

        assert result.transactions[0].date == datetime(2025, 1, 20)
        assert result.transactions[0].value == pytest.approx(10.0)

    def test_invalid_header(self) -> None:
        """Missing 'Valor em R$' aborts the import."""
        with pytest.raises(InvalidHeaderError) as exc_info:
            parse_csv(csv_text("15/03/2024;X;10,00", header="data_lançamento;Categoria;Valor"), TransactionType.REVENUE)

        assert "Valor em R$" in str(exc_info.value)

    def test_empty_file_is_invalid_header(self) -> None:
        with pytest.raises(InvalidHeaderError):
            parse_csv("\n\n", TransactionType.REVENUE)

    def test_no_valid_rows(self) -> None:
        """A valid header with nothing parseable fails."""
        with pytest.raises(NoValidRowsError) as exc_info:
            parse_csv(csv_text("2024-03-15;X;10,00", "15/03/2024;X;abc"), TransactionType.REVENUE)

        assert len(exc_info.value.skipped) == 2

    def test_header_only_has_no_valid_rows(self) -> None:
        with pytest.raises(NoValidRowsError):
            parse_csv(csv_text(), TransactionType.REVENUE)

    def test_errors_share_a_base_class(self) -> None:
        assert issubclass(InvalidHeaderError, CsvImportError)
        assert issubclass(NoValidRowsError, CsvImportError)

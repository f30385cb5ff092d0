"""Command-line entry point."""

import pytest
from openpyxl import load_workbook

from billsight.cli import main

from factories import make_alipay_csv, make_wechat_xlsx


@pytest.fixture
def bill_files(tmp_path):
    wechat = tmp_path / "微信支付账单(20240101-20240131).xlsx"
    wechat.write_bytes(make_wechat_xlsx())
    alipay = tmp_path / "支付宝交易明细(20240101-20240131).csv"
    alipay.write_bytes(make_alipay_csv())
    return [str(wechat), str(alipay)]


def test_summary(bill_files, capsys):
    assert main(["summary", *bill_files]) == 0
    out = capsys.readouterr().out
    assert "Transactions:  6" in out
    assert "2024-W02" in out
    assert "商户消费" in out


def test_summary_with_date_window(bill_files, capsys):
    assert main(["summary", *bill_files, "--start", "2024-01-15", "--end", "2024-01-15"]) == 0
    out = capsys.readouterr().out
    assert "Transactions:  1" in out
    assert "2024-01-15 to 2024-01-15" in out


def test_inverted_window_is_an_error(bill_files, capsys):
    assert main(["summary", *bill_files, "--start", "2024-02-01", "--end", "2024-01-01"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_export(bill_files, tmp_path):
    output = tmp_path / "reports" / "january.xlsx"
    assert main(["export", *bill_files, "--output", str(output)]) == 0
    assert load_workbook(output)["Transactions"].max_row == 7


def test_unparseable_file(tmp_path, capsys):
    bad = tmp_path / "alipay.csv"
    bad.write_text("nothing useful", encoding="utf-8")
    assert main(["summary", str(bad)]) == 1
    assert "alipay.csv" in capsys.readouterr().err


def test_no_command(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()

"""Raw rows → Transactions: amounts, timestamps, flow classification, defaults."""

import datetime as dt
from decimal import Decimal

import pandas as pd
import pytest

from billsight.data.normalize import (
    classify_flow,
    is_neutral_flow,
    normalize_row,
    normalize_rows,
    parse_amount,
    parse_timestamp,
)
from billsight.data.parsers import parse_alipay, parse_wechat
from billsight.data.schemas import SourceDialect, TransactionType
from billsight.errors import AmountParseError, TimestampParseError


def alipay_row(**overrides):
    row = {
        "交易时间": "2024-01-20 19:05:11",
        "交易分类": "餐饮美食",
        "交易对方": "肯德基",
        "商品说明": "汉堡套餐",
        "收/支": "支出",
        "金额": "45.00",
        "收/付款方式": "花呗",
    }
    row.update(overrides)
    return row


def wechat_row(**overrides):
    row = {
        "交易时间": "2024-01-15 12:30:00",
        "交易类型": "商户消费",
        "交易对方": "星巴克",
        "商品": "拿铁",
        "收/支": "支出",
        "金额(元)": "¥38.50",
        "支付方式": "零钱",
    }
    row.update(overrides)
    return row


class TestParseAmount:
    @pytest.mark.parametrize("raw, expected", [
        ("¥1,234.56", Decimal("1234.56")),
        ("45.00", Decimal("45.00")),
        ("-25.00", Decimal("25.00")),
        (" ¥ 0.01 ", Decimal("0.01")),
        (12.5, Decimal("12.5")),
        (300, Decimal("300")),
    ])
    def test_valid(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "¥", "abc", "0.00", "1.2.3"])
    def test_invalid(self, raw):
        with pytest.raises(AmountParseError):
            parse_amount(raw)


class TestParseTimestamp:
    def test_iso_string(self):
        assert parse_timestamp("2024-01-15 12:30:00") == dt.datetime(2024, 1, 15, 12, 30)

    def test_chinese_date(self):
        assert parse_timestamp("2024年1月15日 12:30") == dt.datetime(2024, 1, 15, 12, 30)

    def test_slash_date(self):
        assert parse_timestamp("2024/01/15 08:05:09") == dt.datetime(2024, 1, 15, 8, 5, 9)

    def test_workbook_datetime_passes_through(self):
        moment = dt.datetime(2024, 1, 15, 12, 30)
        assert parse_timestamp(moment) is moment

    def test_pandas_timestamp(self):
        assert parse_timestamp(pd.Timestamp("2024-01-15 12:30")) == dt.datetime(2024, 1, 15, 12, 30)

    def test_offset_keeps_local_wall_clock(self):
        moment = parse_timestamp("2024-01-16T02:00:00+08:00")
        assert moment == dt.datetime(2024, 1, 16, 2, 0)
        assert moment.tzinfo is None
        assert moment.date() == dt.date(2024, 1, 16)

    def test_aware_datetime_drops_zone(self):
        aware = dt.datetime(2024, 1, 15, 0, 30, tzinfo=dt.timezone(dt.timedelta(hours=8)))
        assert parse_timestamp(aware) == dt.datetime(2024, 1, 15, 0, 30)

    @pytest.mark.parametrize("raw", [None, "", "not a date", 45321])
    def test_invalid(self, raw):
        with pytest.raises(TimestampParseError):
            parse_timestamp(raw)


class TestFlow:
    def test_wechat_neutral_is_exact_match(self):
        assert is_neutral_flow(SourceDialect.WECHAT, "/")
        assert not is_neutral_flow(SourceDialect.WECHAT, "/支出")
        assert not is_neutral_flow(SourceDialect.WECHAT, "不计收支")

    def test_alipay_neutral_is_substring_match(self):
        assert is_neutral_flow(SourceDialect.ALIPAY, "不计收支")
        assert is_neutral_flow(SourceDialect.ALIPAY, "(不计收支)")
        assert not is_neutral_flow(SourceDialect.ALIPAY, "/")

    def test_missing_flow_is_not_neutral(self):
        assert not is_neutral_flow(SourceDialect.WECHAT, None)

    @pytest.mark.parametrize("flow, expected", [
        ("收入", TransactionType.INCOME),
        ("已收入", TransactionType.INCOME),
        ("支出", TransactionType.EXPENSE),
        ("", TransactionType.EXPENSE),
        (None, TransactionType.EXPENSE),
    ])
    def test_classify(self, flow, expected):
        assert classify_flow(flow) == expected


class TestNormalizeRow:
    def test_alipay_expense(self):
        tx = normalize_row(alipay_row(), SourceDialect.ALIPAY)
        assert tx.transaction_time == dt.datetime(2024, 1, 20, 19, 5, 11)
        assert tx.amount == Decimal("45.00")
        assert tx.type == TransactionType.EXPENSE
        assert tx.category == "餐饮美食"
        assert tx.counterparty == "肯德基"
        assert tx.description == "汉堡套餐"
        assert tx.payment_method == "花呗"
        assert tx.source == SourceDialect.ALIPAY

    def test_wechat_income(self):
        tx = normalize_row(wechat_row(**{"收/支": "收入", "金额(元)": "¥5,000.00"}), SourceDialect.WECHAT)
        assert tx.type == TransactionType.INCOME
        assert tx.amount == Decimal("5000.00")
        assert tx.source == SourceDialect.WECHAT

    def test_neutral_rows_discarded(self):
        assert normalize_row(alipay_row(**{"收/支": "不计收支"}), SourceDialect.ALIPAY) is None
        assert normalize_row(wechat_row(**{"收/支": "/"}), SourceDialect.WECHAT) is None

    def test_neutral_discarded_even_with_bad_amount(self):
        assert normalize_row(wechat_row(**{"收/支": "/", "金额(元)": None}), SourceDialect.WECHAT) is None

    def test_neutral_discarded_even_with_bad_timestamp(self):
        row = alipay_row(**{"收/支": "不计收支", "交易时间": "garbage"})
        assert normalize_row(row, SourceDialect.ALIPAY) is None
        assert normalize_row(wechat_row(**{"收/支": "/", "交易时间": "garbage"}), SourceDialect.WECHAT) is None

    def test_defaults_for_missing_text_fields(self):
        row = {"交易时间": "2024-01-20 19:05:11", "收/支": "支出", "金额": "1.00", "交易分类": None}
        tx = normalize_row(row, SourceDialect.ALIPAY)
        assert tx.category == "Other"
        assert tx.counterparty == ""
        assert tx.description == ""
        assert tx.payment_method == ""

    def test_ids_unique(self):
        a = normalize_row(alipay_row(), SourceDialect.ALIPAY)
        b = normalize_row(alipay_row(), SourceDialect.ALIPAY)
        assert a.id != b.id


class TestNormalizeRows:
    def test_unparseable_rows_skipped(self):
        rows = [
            alipay_row(),
            alipay_row(**{"交易时间": "garbage"}),
            alipay_row(**{"金额": "0.00"}),
            alipay_row(**{"收/支": "不计收支"}),
            alipay_row(**{"商品说明": "薯条"}),
        ]
        txs = normalize_rows(rows, SourceDialect.ALIPAY, "alipay.csv")
        assert [t.description for t in txs] == ["汉堡套餐", "薯条"]

    def test_wechat_export(self, wechat_xlsx):
        txs = normalize_rows(parse_wechat(wechat_xlsx), SourceDialect.WECHAT)
        assert len(txs) == 3
        assert sum(t.type == TransactionType.INCOME for t in txs) == 1

    def test_alipay_export(self, alipay_csv):
        txs = normalize_rows(parse_alipay(alipay_csv), SourceDialect.ALIPAY)
        assert len(txs) == 3
        by_desc = {t.description: t for t in txs}
        assert "余额宝-自动转入" not in by_desc
        assert by_desc["红包"].payment_method == ""

    def test_every_amount_positive_and_typed(self, wechat_xlsx, alipay_csv):
        txs = normalize_rows(parse_wechat(wechat_xlsx), SourceDialect.WECHAT) + normalize_rows(
            parse_alipay(alipay_csv), SourceDialect.ALIPAY)
        assert all(t.amount > 0 for t in txs)
        assert {t.type for t in txs} <= {TransactionType.INCOME, TransactionType.EXPENSE}

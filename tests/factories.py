"""Builders for in-memory WeChat Pay / Alipay exports and transactions.

Exports are laid out the way the providers ship them: WeChat Pay workbooks carry
a 16-row preamble before the header, Alipay files carry a preamble of varying
length, and Alipay CSVs are GB18030-encoded.
"""

from __future__ import annotations

import csv
import datetime as dt
import io
from decimal import Decimal
from itertools import count

from openpyxl import Workbook

from billsight.data.schemas import DateRange, SourceDialect, Transaction, TransactionType
from billsight.data.store import SessionStore

WECHAT_HEADER = [
    "交易时间", "交易类型", "交易对方", "商品", "收/支",
    "金额(元)", "支付方式", "当前状态", "交易单号", "商户单号", "备注",
]

ALIPAY_HEADER = [
    "交易时间", "交易分类", "交易对方", "对方账号", "商品说明", "收/支",
    "金额", "收/付款方式", "交易状态", "交易订单号", "商家订单号", "备注",
]

WECHAT_PREAMBLE = [
    ["微信支付账单明细"],
    ["微信昵称：[测试用户]"],
    ["起始时间：[2024-01-01 00:00:00] 终止时间：[2024-01-31 23:59:59]"],
    ["导出类型：[全部]"],
    ["导出时间：[2024-02-01 10:00:00]"],
    [],
    ["共3笔记录"],
    ["收入：1笔 5000.00元"],
    ["支出：2笔 68.50元"],
    ["中性交易：0笔 0.00元"],
    ["注："],
    ["1. 充值/提现/理财通购买/零钱通存取/信用卡还款等交易，将计入中性交易"],
    ["2. 本明细仅展示当前账单中的交易，不包括已删除的记录"],
    ["3. 本明细仅供个人对账使用"],
    [],
    ["----------------------微信支付账单明细列表--------------------"],
]

ALIPAY_PREAMBLE = [
    ["------------------------------------------------------------------------------------"],
    ["导出信息："],
    ["姓名：测试用户"],
    ["支付宝账户：test@example.com"],
    ["起始时间：[2024-01-01 00:00:00]    终止时间：[2024-01-31 23:59:59]"],
    ["导出交易类型：[全部]"],
    ["导出时间：[2024-02-01 10:00:00]"],
    ["共3笔记录"],
    ["------------------------支付宝（中国）网络技术有限公司  电子客户回单------------------------"],
]

WECHAT_ROWS = [
    ["2024-01-15 12:30:00", "商户消费", "星巴克", "拿铁", "支出", "¥38.50", "零钱", "支付成功", "1001", "2001", "/"],
    ["2024-01-10 09:00:00", "转账", "张三", "/", "收入", "¥5,000.00", "/", "已存入零钱", "1002", "", "/"],
    ["2024-01-08 18:45:00", "商户消费", "美团", "外卖", "支出", "¥30.00", "招商银行(1234)", "支付成功", "1003", "2003", "/"],
    ["2024-01-05 08:00:00", "零钱提现", "招商银行(1234)", "/", "/", "¥200.00", "零钱", "提现已到账", "1004", "", "/"],
]

ALIPAY_ROWS = [
    ["2024-01-20 19:05:11", "餐饮美食", "肯德基", "kfc@example.com", "汉堡套餐", "支出", "45.00", "花呗", "交易成功", "3001", "4001", ""],
    ["2024-01-18 10:00:00", "转账红包", "李四", "li@example.com", "红包", "收入", "100.00", "", "交易成功", "3002", "", ""],
    ["2024-01-12 14:20:00", "日用百货", "超市", "shop@example.com", "纸巾", "支出", "12.80", "余额宝", "交易成功", "3003", "4003", ""],
    ["2024-01-03 07:30:00", "投资理财", "余额宝", "", "余额宝-自动转入", "不计收支", "500.00", "账户余额", "交易成功", "3004", "", ""],
]


def _workbook_bytes(rows: list[list]) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def make_wechat_xlsx(rows: list[list] | None = None, header: list[str] | None = None) -> bytes:
    return _workbook_bytes(WECHAT_PREAMBLE + [header or WECHAT_HEADER] + (WECHAT_ROWS if rows is None else rows))


def make_alipay_csv(
    rows: list[list] | None = None,
    preamble: list[list] | None = None,
    encoding: str = "gb18030",
) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    for row in (ALIPAY_PREAMBLE if preamble is None else preamble):
        writer.writerow(row)
    writer.writerow(ALIPAY_HEADER)
    for row in (ALIPAY_ROWS if rows is None else rows):
        # Alipay pads cells with trailing tabs/spaces
        writer.writerow([f"{c}\t" if c else c for c in row])
    return buffer.getvalue().encode(encoding)


def make_alipay_xlsx(rows: list[list] | None = None, preamble: list[list] | None = None) -> bytes:
    return _workbook_bytes(
        (ALIPAY_PREAMBLE if preamble is None else preamble)
        + [ALIPAY_HEADER]
        + (ALIPAY_ROWS if rows is None else rows)
    )


_ids = count(1)


def make_tx(
    when: dt.datetime | str,
    amount: str | int | float = "10.00",
    description: str = "",
    type: TransactionType = TransactionType.EXPENSE,
    category: str = "Other",
    counterparty: str = "",
    payment_method: str = "",
    source: SourceDialect = SourceDialect.ALIPAY,
) -> Transaction:
    if isinstance(when, str):
        when = dt.datetime.fromisoformat(when)
    return Transaction(
        id=f"t{next(_ids)}",
        transaction_time=when,
        category=category,
        counterparty=counterparty,
        description=description,
        type=type,
        amount=Decimal(str(amount)),
        payment_method=payment_method,
        source=source,
    )


class FakeUpload:
    """Stand-in for an uploaded file: a filename plus an async read()."""

    def __init__(self, filename: str, content: bytes = b"", error: Exception | None = None) -> None:
        self.filename = filename
        self._content = content
        self._error = error

    async def read(self) -> bytes:
        if self._error is not None:
            raise self._error
        return self._content


def store_with(transactions) -> SessionStore:
    """A SessionStore already holding ``transactions`` with no date filter."""
    store = SessionStore()
    store._snapshot = store._derive(transactions, DateRange(), store.upload_status)
    return store

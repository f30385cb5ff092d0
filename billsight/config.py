"""
Billsight — Configuration: paths, dialect tables, constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths (override with the BILLSIGHT_DATA_DIR env var)
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("BILLSIGHT_DATA_DIR", str(Path.home() / "Billsight")))
REPORTS_FOLDER = _data_dir / "reports"

# ---------------------------------------------------------------------------
# Logging (BILLSIGHT_LOG_LEVEL: DEBUG shows every skipped row)
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("BILLSIGHT_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(short_name)s: %(message)s"

# ---------------------------------------------------------------------------
# Source dialects (filename hints matched case-insensitively)
# ---------------------------------------------------------------------------
WECHAT_FILENAME_HINTS = ["微信支付", "wechat"]
ALIPAY_FILENAME_HINTS = ["支付宝", "alipay"]

# WeChat Pay exports carry a fixed 16-row preamble before the header
WECHAT_PREAMBLE_ROWS = 16

# Alipay exports have a variable preamble; the header is the first row
# (within the lookahead window) containing all of these labels
ALIPAY_HEADER_KEYWORDS = ["交易时间", "交易分类", "商品说明"]
HEADER_LOOKAHEAD_ROWS = 30

CSV_ENCODINGS = ["utf-8-sig", "gb18030"]

# ---------------------------------------------------------------------------
# Column mapping from raw export labels → canonical fields
# ---------------------------------------------------------------------------
WECHAT_FIELD_MAP = {
    "flow": "收/支",
    "transaction_time": "交易时间",
    "amount": "金额(元)",
    "category": "交易类型",
    "counterparty": "交易对方",
    "description": "商品",
    "payment_method": "支付方式",
}

ALIPAY_FIELD_MAP = {
    "flow": "收/支",
    "transaction_time": "交易时间",
    "amount": "金额",
    "category": "交易分类",
    "counterparty": "交易对方",
    "description": "商品说明",
    "payment_method": "收/付款方式",
}

# Labels a header row must carry before any row is mapped
REQUIRED_FIELDS = ["flow", "transaction_time", "amount"]

# Flow-indicator values
INCOME_MARKER = "收入"
WECHAT_NEUTRAL_FLOW = "/"          # exact match
ALIPAY_NEUTRAL_FLOW = "不计收支"     # substring match

DEFAULT_CATEGORY = "Other"

# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
EXPORT_MAX_RETRIES = 2
EXPORT_RETRY_BACKOFF_SECONDS = 1.0
CURRENCY_SYMBOL = "¥"

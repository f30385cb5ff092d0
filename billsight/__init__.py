"""Billsight — WeChat Pay / Alipay bill ingestion and analytics."""
__version__ = "1.0.0"

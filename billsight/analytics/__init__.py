"""Pure aggregations over transaction sets."""
from .summary import category_stats, date_range_label, generate_summary, payment_method_stats, weekly_series

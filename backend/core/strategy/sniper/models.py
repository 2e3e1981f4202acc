"""Sniper strategy name and signal reasons."""

SNIPER_STRATEGY_NAME = "sniper"

# Reasons reported on each signal
REASON_LOCKED = "sniper lock"
REASON_SYNCHRONIZING = "synchronizing"
REASON_CONNECTION_ERROR = "connection error"
REASON_BELOW_EMA200 = "below EMA200"
REASON_ADX_LOW = "ADX too low (<15)"
REASON_LOW_VOLUME = "insufficient volume (<1.2×)"
REASON_RSI_ADJUSTING = "RSI adjusting"

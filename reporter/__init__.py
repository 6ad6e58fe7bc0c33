"""
Monthly vnstat usage reporter delivering summaries to Telegram.
"""

"""Core domain package for abmeldung.

Core contains interval parsing, day aggregation, and the day-record
bookkeeping without any Telegram or storage-specific code.
"""

"""Core domain package for ackbot.

Core contains classification, deduplication, and command routing logic
without any Telegram or storage-specific code, keeping the business logic
portable.
"""

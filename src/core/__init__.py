"""Core domain package for echobot.

Core contains redirect matching, message transformation, and dispatch logic
without any Discord-specific code, keeping the relay rules portable.
"""

"""Core — discovery, templating, and file operations. No click imports here."""

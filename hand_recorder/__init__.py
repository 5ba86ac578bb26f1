"""Hand Recorder - record, replay and review no-limit hold'em hands."""

__version__ = "0.1.0"

from .event_names import EventNames

__all__ = ["EventNames"]

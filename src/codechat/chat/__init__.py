from .transcript import ChatTranscript, EntryKind, TranscriptEntry

__all__ = ["ChatTranscript", "EntryKind", "TranscriptEntry"]

"""Engine events — synchronous notifications such as ``IndexCreated``."""

from meiliscout.events.dispatcher import EventDispatcher, IndexCreated, RecordingEventDispatcher

__all__ = ["EventDispatcher", "IndexCreated", "RecordingEventDispatcher"]

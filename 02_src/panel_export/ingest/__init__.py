"""Ingestion service client."""

from .uploader import IRecordingUploader, RecordingUploader

__all__ = ["IRecordingUploader", "RecordingUploader"]

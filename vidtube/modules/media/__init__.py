"""
Media Module - Black Box Interface

Purpose: Stage uploaded files locally and push them to the media host
Interface: CloudinaryBlobStore.upload(), UploadStager.stage(), discard()
Hidden: Request signing, multipart encoding, temp-file lifecycle
"""

from .blob_store import CloudinaryBlobStore, discard, sign_params
from .staging import UploadStager

__all__ = ["CloudinaryBlobStore", "UploadStager", "discard", "sign_params"]

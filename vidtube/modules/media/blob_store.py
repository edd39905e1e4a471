"""
Cloudinary blob store.

Uploads a locally staged file through Cloudinary's signed REST upload
endpoint and always removes the local copy afterwards.
"""

import hashlib
import logging
import os
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from vidtube.config.provider import CloudinaryConfig
from vidtube.errors import InternalError

logger = logging.getLogger(__name__)

UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/{resource_type}/upload"

# Parameters Cloudinary excludes from the signature
_UNSIGNED_PARAMS = {"file", "api_key", "resource_type", "cloud_name"}


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """
    Compute a Cloudinary request signature.

    Parameters are sorted by name, joined as key=value pairs with '&', the
    API secret is appended and the result is SHA-1 hashed.
    """
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def discard(local_path: Optional[str]) -> None:
    """Remove a staged file if it is still there."""
    if local_path and os.path.exists(local_path):
        try:
            os.remove(local_path)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {local_path}: {e}")


class CloudinaryBlobStore:
    """Uploads media to Cloudinary and returns the hosted asset description."""

    def __init__(self, config: CloudinaryConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize blob store.

        Args:
            config: Cloudinary credentials
            client: Optional shared httpx client; a short-lived one is created
                per upload otherwise
        """
        self.config = config
        self.client = client

    async def upload(self, local_path: str, resource_type: str = "auto") -> Dict[str, Any]:
        """
        Upload a local file and delete it, whatever the outcome.

        Returns:
            Dict with url, public_id, resource_type and duration (videos only)

        Raises:
            InternalError: If the store is not configured or the upload fails
        """
        try:
            if not self.config.is_configured:
                logger.error("Cloudinary upload attempted without credentials")
                raise InternalError("Media storage is not configured")

            params = {"timestamp": int(time.time())}
            data = {
                **params,
                "api_key": self.config.api_key,
                "signature": sign_params(params, self.config.api_secret),
            }
            url = UPLOAD_URL.format(cloud_name=self.config.cloud_name, resource_type=resource_type)

            with open(local_path, "rb") as fh:
                files = {"file": (os.path.basename(local_path), fh)}
                payload = await self._post(url, data, files)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Cloudinary upload of {local_path} failed: {e}")
            raise InternalError("Failed to upload file")
        except OSError as e:
            logger.error(f"Could not read staged file {local_path}: {e}")
            raise InternalError("Failed to upload file")
        finally:
            discard(local_path)

        asset = {
            "url": payload.get("secure_url") or payload.get("url"),
            "public_id": payload.get("public_id"),
            "resource_type": payload.get("resource_type"),
            "duration": payload.get("duration"),
        }
        if not asset["url"]:
            logger.error(f"Cloudinary response without URL for {local_path}")
            raise InternalError("Failed to upload file")

        logger.info(f"Uploaded {asset['public_id']} ({asset['resource_type']})")
        return asset

    async def _post(self, url: str, data: Dict[str, Any], files: Dict[str, Any]) -> Dict[str, Any]:
        if self.client is not None:
            response = await self.client.post(url, data=data, files=files)
        else:
            async with httpx.AsyncClient(timeout=self.config.upload_timeout) as client:
                response = await client.post(url, data=data, files=files)
        response.raise_for_status()
        return response.json()
